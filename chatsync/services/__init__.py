"""Reconciliation services: record sync, chat projection, notification dispatch, auth."""
from chatsync.services.auth_service import AuthResult, AuthService
from chatsync.services.booking_fetcher import BookingRecordFetcher
from chatsync.services.chat_mapping_resolver import ChatMappingResolver, ResolvedMapping
from chatsync.services.chat_projector import (
    ChatStatusProjector,
    determine_chat_status,
    is_record_active,
    select_display_record,
)
from chatsync.services.chat_sync_service import ChatSyncService
from chatsync.services.notification_dispatcher import NotificationDispatcher, build_push_message
from chatsync.services.notification_service import NotificationService
from chatsync.services.participant_resolver import ParticipantKeys, ParticipantResolver
from chatsync.services.record_reconciler import RecordReconciler, normalize_record
from chatsync.services.record_sync_service import RecordSyncService
from chatsync.services.user_sync_service import UserSyncService

__all__ = [
    "AuthResult",
    "AuthService",
    "BookingRecordFetcher",
    "ChatMappingResolver",
    "ResolvedMapping",
    "ChatStatusProjector",
    "determine_chat_status",
    "is_record_active",
    "select_display_record",
    "ChatSyncService",
    "NotificationDispatcher",
    "build_push_message",
    "NotificationService",
    "ParticipantKeys",
    "ParticipantResolver",
    "RecordReconciler",
    "normalize_record",
    "RecordSyncService",
    "UserSyncService",
]
