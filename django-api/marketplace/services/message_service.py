"""Message service - direct messages between profiles."""

import logging

from marketplace.domain import Conversation, Message, ProfileId, ServiceResult, UserId
from marketplace.domain.errors import DomainError, ProfileNotFoundError, ValidationFailedError
from marketplace.services.common import index_by, parse_id
from marketplace.stores.interfaces import MessageStore, ProfileStore

logger = logging.getLogger(__name__)


class MessageService:
    def __init__(self, messages: MessageStore, profiles: ProfileStore) -> None:
        self._messages = messages
        self._profiles = profiles

    def send_message(
        self,
        user_id: UserId,
        recipient_profile_id: str,
        content: str,
        topic: str = "",
    ) -> ServiceResult[Message | None]:
        try:
            content = (content or "").strip()
            if not content:
                raise ValidationFailedError("Message cannot be empty")
            recipient_id = parse_id(ProfileId, recipient_profile_id, "profile ID")
            sender = self._profiles.get_profile_for_user(user_id)
            if sender is None:
                raise ProfileNotFoundError()
            if sender.id == recipient_id:
                raise ValidationFailedError("You cannot message yourself")
            recipient = self._profiles.get_profile(recipient_id)
            if recipient is None:
                raise ProfileNotFoundError()
            message = self._messages.create_message(
                sender.id, recipient.id, (topic or "").strip(), content
            )
        except DomainError as exc:
            return ServiceResult(None, exc)
        logger.info("Message %s sent from %s to %s", message.id, sender.id, recipient.id)
        return ServiceResult(message)

    def get_conversations(self, user_id: UserId) -> ServiceResult[list[Conversation]]:
        """Return one conversation per correspondent, most recent first.

        A caller without a profile has no conversations. Correspondents whose
        profile no longer resolves are left out.
        """
        try:
            profile = self._profiles.get_profile_for_user(user_id)
            if profile is None:
                return ServiceResult([])
            messages = self._messages.list_messages_for_profile(profile.id)
            latest: dict[ProfileId, Message] = {}
            for message in messages:
                other_id = (
                    message.recipient_profile_id
                    if message.sender_profile_id == profile.id
                    else message.sender_profile_id
                )
                latest.setdefault(other_id, message)
            others = index_by(self._profiles.get_profiles(list(latest))) if latest else {}
        except DomainError as exc:
            return ServiceResult([], exc)

        return ServiceResult(
            [
                Conversation(other_profile=others[other_id], last_message=message)
                for other_id, message in latest.items()
                if other_id in others
            ]
        )

    def get_conversation(
        self, user_id: UserId, other_profile_id: str
    ) -> ServiceResult[Conversation | None]:
        """Return every message exchanged with one profile, oldest first."""
        try:
            other_id = parse_id(ProfileId, other_profile_id, "profile ID")
            profile = self._profiles.get_profile_for_user(user_id)
            if profile is None:
                raise ProfileNotFoundError()
            other = self._profiles.get_profile(other_id)
            if other is None:
                raise ProfileNotFoundError()
            messages = self._messages.list_conversation(profile.id, other.id)
        except DomainError as exc:
            return ServiceResult(None, exc)
        return ServiceResult(
            Conversation(
                other_profile=other,
                last_message=messages[-1] if messages else None,
                messages=tuple(messages),
            )
        )
