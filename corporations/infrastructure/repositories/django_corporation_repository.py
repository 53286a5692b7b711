"""
Django implementation of CorporationRepository port.

This adapter converts between the Corporation aggregate and the
corporation, attachment and period tables. Consumer uniqueness and
code uniqueness are enforced by database constraints; the adapter
maps their violations to domain conflicts.
"""
import logging
import uuid
from datetime import datetime
from typing import Iterable, Optional

from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction
from django.db.models import Prefetch

from core.domain.exceptions import ClientAlreadyLinkedError, CodeAlreadyUsedError
from core.domain.value_objects import EntitlementPeriod
from core.infrastructure.database import storage_errors
from corporations.domain.client_attachment import ClientAttachment
from corporations.domain.corporation import Corporation
from corporations.infrastructure.models import (
    ClientAttachment as ClientAttachmentModel,
)
from corporations.infrastructure.models import (
    Corporation as CorporationModel,
)
from corporations.infrastructure.models import (
    EntitlementPeriod as EntitlementPeriodModel,
)
from corporations.ports.corporation_repository import (
    CorporationRepository,
    CorporationWithAttachment,
)

logger = logging.getLogger(__name__)

ACTIVE_ATTACHMENTS_ATTR = "active_attachment_models"


class DjangoCorporationRepository(CorporationRepository):
    """Django ORM implementation of CorporationRepository."""

    def _corporations(self):
        """Corporation queryset with active attachments and their periods prefetched."""
        return CorporationModel.objects.prefetch_related(
            Prefetch(
                "attachments",
                queryset=ClientAttachmentModel.objects.filter(disabled=False).prefetch_related(
                    "periods"
                ),
                to_attr=ACTIVE_ATTACHMENTS_ATTR,
            )
        )

    def _period_to_domain(self, model: EntitlementPeriodModel) -> EntitlementPeriod:
        """Convert a period row to a value object."""
        return EntitlementPeriod(
            begin_date=model.begin_date,
            end_date=model.end_date,
            is_demo=model.is_demo,
        )

    def _attachment_to_domain(self, model: ClientAttachmentModel) -> ClientAttachment:
        """
        Convert Django model to domain entity.

        Args:
            model: Django ClientAttachment model

        Returns:
            ClientAttachment domain entity
        """
        periods = sorted(model.periods.all(), key=lambda period: period.position)
        return ClientAttachment(
            id=model.id,
            corporation_id=model.corporation_id,
            consumer_key=model.consumer_key,
            license_key=model.license_key,
            disabled=model.disabled,
            unlink_date=model.unlink_date,
            token=model.token,
            token_given_date=model.token_given_date,
            token_end_date=model.token_end_date,
            periods=tuple(self._period_to_domain(period) for period in periods),
            created_at=model.created_at,
        )

    def _to_domain(
        self,
        model: CorporationModel,
        attachments: Optional[Iterable[ClientAttachmentModel]] = None,
    ) -> Corporation:
        """
        Convert Django model to domain entity.

        Args:
            model: Django Corporation model
            attachments: Active attachment models (queried when omitted)

        Returns:
            Corporation domain entity
        """
        if attachments is None:
            attachments = getattr(model, ACTIVE_ATTACHMENTS_ATTR, None)
        if attachments is None:
            attachments = model.attachments.filter(disabled=False).prefetch_related("periods")
        return Corporation(
            id=model.id,
            code=model.code,
            description=model.description,
            town=model.town,
            city=model.city,
            banned=model.banned,
            attachments=tuple(self._attachment_to_domain(item) for item in attachments),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _load(self, corporation_id: uuid.UUID) -> Corporation:
        """Reload an aggregate by ID."""
        return self._to_domain(self._corporations().get(id=corporation_id))

    @sync_to_async
    def save(self, corporation: Corporation) -> Corporation:
        """
        Insert or update the corporation profile.

        Args:
            corporation: Corporation entity to save

        Returns:
            Saved corporation entity

        Raises:
            CodeAlreadyUsedError: If another corporation holds the code
        """
        with storage_errors("save corporation"):
            try:
                with transaction.atomic():
                    model, created = CorporationModel.objects.get_or_create(
                        id=corporation.id,
                        defaults={
                            "code": corporation.code,
                            "description": corporation.description,
                            "town": corporation.town,
                            "city": corporation.city,
                            "banned": corporation.banned,
                        },
                    )
                    if not created:
                        model.code = corporation.code
                        model.description = corporation.description
                        model.town = corporation.town
                        model.city = corporation.city
                        model.banned = corporation.banned
                        model.save()
            except IntegrityError as e:
                logger.info("Corporation code %s rejected by unique index", corporation.code)
                raise CodeAlreadyUsedError() from e
            return self._load(model.id)

    @sync_to_async
    def find_by_id(self, corporation_id: uuid.UUID) -> Optional[Corporation]:
        """
        Find a corporation by ID.

        Args:
            corporation_id: Corporation UUID

        Returns:
            Corporation entity or None if not found
        """
        with storage_errors("find corporation"):
            try:
                return self._load(corporation_id)
            except CorporationModel.DoesNotExist:
                return None

    @sync_to_async
    def find_by_code(self, code: str) -> Optional[Corporation]:
        """
        Find a corporation by code.

        Args:
            code: Corporation code

        Returns:
            Corporation entity or None if not found
        """
        with storage_errors("find corporation"):
            try:
                return self._to_domain(self._corporations().get(code=code))
            except CorporationModel.DoesNotExist:
                return None

    @sync_to_async
    def code_exists(self, code: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
        """
        Check whether a code is taken.

        Args:
            code: Corporation code
            exclude_id: Corporation to ignore (the one being updated)

        Returns:
            True if another corporation holds the code
        """
        with storage_errors("check corporation code"):
            queryset = CorporationModel.objects.filter(code=code)
            if exclude_id is not None:
                queryset = queryset.exclude(id=exclude_id)
            return queryset.exists()

    @sync_to_async
    def find_active_attachment(
        self, consumer_key: str
    ) -> Optional[CorporationWithAttachment]:
        """
        Find the consumer's active attachment across all corporations.

        Args:
            consumer_key: External client identifier

        Returns:
            (Corporation, ClientAttachment) or None if the consumer is not linked
        """
        with storage_errors("find active attachment"):
            model = (
                ClientAttachmentModel.objects.filter(consumer_key=consumer_key, disabled=False)
                .prefetch_related("periods")
                .first()
            )
            if model is None:
                return None
            return self._load(model.corporation_id), self._attachment_to_domain(model)

    @sync_to_async
    def has_any_attachment(self, consumer_key: str) -> bool:
        """
        Check whether the consumer was ever attached.

        Args:
            consumer_key: External client identifier

        Returns:
            True if any attachment, active or disabled, holds the consumer key
        """
        with storage_errors("check consumer history"):
            return ClientAttachmentModel.objects.filter(consumer_key=consumer_key).exists()

    @sync_to_async
    def add_attachment(self, attachment: ClientAttachment) -> ClientAttachment:
        """
        Persist a new active attachment with its periods.

        The attachment row and its periods are written in one
        transaction. The partial unique index on active consumers
        decides concurrent links for the same consumer.

        Args:
            attachment: ClientAttachment to insert

        Returns:
            Saved attachment

        Raises:
            ClientAlreadyLinkedError: If the consumer already has an active attachment
        """
        with storage_errors("add attachment"):
            try:
                with transaction.atomic():
                    model = ClientAttachmentModel.objects.create(
                        id=attachment.id,
                        corporation_id=attachment.corporation_id,
                        consumer_key=attachment.consumer_key,
                        license_key=attachment.license_key,
                        disabled=False,
                        unlink_date=None,
                    )
                    EntitlementPeriodModel.objects.bulk_create(
                        [
                            EntitlementPeriodModel(
                                attachment=model,
                                position=position,
                                begin_date=period.begin_date,
                                end_date=period.end_date,
                                is_demo=period.is_demo,
                            )
                            for position, period in enumerate(attachment.periods)
                        ]
                    )
            except IntegrityError as e:
                if ClientAttachmentModel.objects.filter(
                    consumer_key=attachment.consumer_key, disabled=False
                ).exists():
                    raise ClientAlreadyLinkedError() from e
                raise
            return self._attachment_to_domain(
                ClientAttachmentModel.objects.prefetch_related("periods").get(id=model.id)
            )

    @sync_to_async
    def disable_active_attachment(
        self, consumer_key: str, unlink_date: datetime
    ) -> Optional[ClientAttachment]:
        """
        Atomically disable the consumer's active attachment.

        Args:
            consumer_key: External client identifier
            unlink_date: Timestamp recorded on the attachment

        Returns:
            The disabled attachment, or None if none was active
        """
        with storage_errors("disable attachment"):
            attachment_id = (
                ClientAttachmentModel.objects.filter(consumer_key=consumer_key, disabled=False)
                .values_list("id", flat=True)
                .first()
            )
            if attachment_id is None:
                return None

            updated = ClientAttachmentModel.objects.filter(
                id=attachment_id, disabled=False
            ).update(disabled=True, unlink_date=unlink_date)
            if updated != 1:
                logger.info("Attachment %s was disabled concurrently", attachment_id)
                return None

            return self._attachment_to_domain(
                ClientAttachmentModel.objects.prefetch_related("periods").get(id=attachment_id)
            )

    @sync_to_async
    def find_latest_unlinked(
        self, corporation_id: uuid.UUID, license_key: str
    ) -> Optional[ClientAttachment]:
        """
        Find the most recently unlinked attachment carrying a license key.

        Args:
            corporation_id: Corporation to search
            license_key: License key string

        Returns:
            The attachment with the latest unlink date, or None
        """
        with storage_errors("find latest unlinked attachment"):
            model = (
                ClientAttachmentModel.objects.filter(
                    corporation_id=corporation_id,
                    license_key=license_key,
                    unlink_date__isnull=False,
                )
                .order_by("-unlink_date")
                .prefetch_related("periods")
                .first()
            )
            return self._attachment_to_domain(model) if model else None

    @sync_to_async
    def set_token(
        self,
        attachment_id: uuid.UUID,
        token: str,
        given_date: datetime,
        end_date: datetime,
    ) -> bool:
        """
        Store a token on an active attachment, replacing any previous one.

        Args:
            attachment_id: Attachment UUID
            token: Opaque token
            given_date: Issue timestamp
            end_date: Expiry timestamp

        Returns:
            True if an active attachment was updated
        """
        with storage_errors("set token"):
            updated = ClientAttachmentModel.objects.filter(
                id=attachment_id, disabled=False
            ).update(token=token, token_given_date=given_date, token_end_date=end_date)
            return updated == 1

    @sync_to_async
    def find_by_token(self, token: str) -> Optional[CorporationWithAttachment]:
        """
        Find the active attachment holding a token.

        Args:
            token: Opaque token

        Returns:
            (Corporation, ClientAttachment) or None if no active attachment holds it
        """
        with storage_errors("find token"):
            model = (
                ClientAttachmentModel.objects.filter(token=token, disabled=False)
                .prefetch_related("periods")
                .first()
            )
            if model is None:
                return None
            return self._load(model.corporation_id), self._attachment_to_domain(model)

    @sync_to_async
    def clear_expired_tokens(self, now: datetime) -> int:
        """
        Remove tokens whose expiry has passed.

        Args:
            now: Reference timestamp

        Returns:
            Number of attachments cleared
        """
        with storage_errors("clear expired tokens"):
            return ClientAttachmentModel.objects.filter(
                token__isnull=False, token_end_date__lte=now
            ).update(token=None, token_given_date=None, token_end_date=None)
