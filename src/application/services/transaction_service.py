"""Transaction service - the approval and ledger-posting workflow."""

from contextlib import nullcontext
from datetime import date
from typing import List, Optional
from uuid import UUID

import structlog

from src.application.dto import (
    CreateTransactionRequest,
    ReportPeriod,
    TransactionResponse,
    UpdateTransactionRequest,
)
from src.core.metrics import (
    record_posting,
    record_state_conflict,
    record_transaction_created,
    record_transition,
    track_posting_latency,
)
from src.domain.entities import (
    Actor,
    Transaction,
    TransactionStatus,
)
from src.domain.exceptions import (
    AccountNotFoundException,
    AuthorizationException,
    InvalidStateException,
    ReferenceNotFoundException,
    TransactionNotFoundException,
    ValidationException,
)
from src.domain.interfaces import LedgerStore
from src.service.ledger import (
    CONVERSION_INPUTS,
    EDITABLE_FIELDS,
    LedgerSettings,
    TransactionDraft,
    apply_leg,
    convert_to_base,
    ensure_valid,
    ledger_settings,
    posting_legs,
)

logger = structlog.get_logger(__name__)


class TransactionService:
    """
    Application service owning the transaction status state machine.

    pending -> approved posts the converted amount to the referenced
    account(s); pending -> rejected has no balance effect. Both moves happen
    at most once. Every write of an operation runs inside a single
    ``LedgerStore.atomic()`` unit, so a failure part-way leaves neither the
    status nor any balance changed.
    """

    def __init__(
        self,
        ledger_store: LedgerStore,
        settings: LedgerSettings = ledger_settings,
    ):
        self._store = ledger_store
        self._settings = settings

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    async def create(
        self,
        request: CreateTransactionRequest,
        submitter: Actor,
    ) -> TransactionResponse:
        """
        Submit a transaction.

        Privileged submitters skip review: their transactions are stored as
        approved and posted in the same unit of work, so no reader ever sees
        them pending.

        Raises:
            ValidationException: If the input breaks a type or currency rule
            NotFoundException: If a referenced company, category, client or
                account does not exist
        """
        draft = request.to_draft()
        ensure_valid(draft, self._settings)
        converted = convert_to_base(
            draft.amount, draft.currency, draft.conversion_rate, self._settings
        )

        status = (
            TransactionStatus.APPROVED
            if submitter.is_privileged
            else TransactionStatus.PENDING
        )
        log = logger.bind(
            owner_id=submitter.id,
            type=draft.type.value,
            status=status.value,
        )

        timer = (
            track_posting_latency()
            if status is TransactionStatus.APPROVED
            else nullcontext()
        )
        with timer:
            async with self._store.atomic():
                await self._check_references(draft)
                transaction = Transaction(
                    **{name: getattr(draft, name) for name in EDITABLE_FIELDS},
                    converted_base_amount=converted,
                    owner_id=submitter.id,
                    status=status,
                )
                transaction = await self._store.create_transaction(transaction)
                if transaction.status is TransactionStatus.APPROVED:
                    await self._post(transaction, log)

        record_transaction_created(transaction.type.value, transaction.status.value)
        if transaction.status is TransactionStatus.APPROVED:
            record_posting(transaction.type.value, transaction.converted_base_amount)

        log.info(
            "transaction_created",
            transaction_id=str(transaction.id),
            amount=str(transaction.amount),
            currency=transaction.currency.value,
            converted_base_amount=str(transaction.converted_base_amount),
        )

        return TransactionResponse.from_entity(transaction)

    async def update(
        self,
        transaction_id: UUID,
        request: UpdateTransactionRequest,
        actor: Actor,
    ) -> TransactionResponse:
        """
        Change a pending transaction.

        The converted amount is recomputed from scratch whenever amount,
        currency or rate is supplied. Balances are never touched.

        Raises:
            TransactionNotFoundException: If the transaction does not exist
            AuthorizationException: If the actor neither owns it nor is privileged
            InvalidStateException: If the transaction is no longer pending
            ValidationException: If the merged transaction is invalid
        """
        changes = dict(request.changes)
        log = logger.bind(transaction_id=str(transaction_id), actor_id=actor.id)

        async with self._store.atomic():
            current = await self._require(transaction_id)
            if not actor.may_modify(current.owner_id):
                raise AuthorizationException(
                    "Only the owner or an admin may update this transaction"
                )
            self._ensure_allowed(current, "update")

            draft = TransactionDraft.from_transaction(current).merge(changes, self._settings)
            ensure_valid(draft, self._settings)

            fields = {
                name: getattr(draft, name)
                for name in EDITABLE_FIELDS
                if getattr(draft, name) != getattr(current, name)
            }
            if CONVERSION_INPUTS & (set(changes) | set(fields)):
                fields["converted_base_amount"] = convert_to_base(
                    draft.amount, draft.currency, draft.conversion_rate, self._settings
                )

            if not fields:
                return TransactionResponse.from_entity(current)

            await self._check_references(draft)
            updated = await self._store.update_transaction(
                transaction_id, fields, expected=TransactionStatus.PENDING
            )
            if updated is None:
                await self._raise_conflict(transaction_id, "update")

        log.info("transaction_updated", fields=sorted(fields))

        return TransactionResponse.from_entity(updated)

    async def approve(self, transaction_id: UUID, actor: Actor) -> TransactionResponse:
        """
        Approve a pending transaction and post it to account balances.

        The status flip is conditional on the stored status still being
        pending, so of several concurrent approvals exactly one posts.

        Raises:
            AuthorizationException: If the actor is not privileged
            TransactionNotFoundException: If the transaction does not exist
            InvalidStateException: If the transaction is not pending
            AccountNotFoundException: If an account the type needs is missing;
                nothing is posted in that case
        """
        self._require_privileged(actor, "approve")
        log = logger.bind(transaction_id=str(transaction_id), actor_id=actor.id)

        with track_posting_latency():
            async with self._store.atomic():
                current = await self._require(transaction_id)
                self._ensure_allowed(current, "approve", TransactionStatus.APPROVED)

                approved = await self._store.set_transaction_status(
                    transaction_id,
                    TransactionStatus.APPROVED,
                    expected=TransactionStatus.PENDING,
                )
                if approved is None:
                    await self._raise_conflict(transaction_id, "approve")

                await self._post(approved, log)

        record_transition(TransactionStatus.APPROVED.value)
        record_posting(approved.type.value, approved.converted_base_amount)
        log.info(
            "transaction_approved",
            type=approved.type.value,
            converted_base_amount=str(approved.converted_base_amount),
        )

        return TransactionResponse.from_entity(approved)

    async def reject(self, transaction_id: UUID, actor: Actor) -> TransactionResponse:
        """
        Reject a pending transaction. No balance is affected.

        Raises:
            AuthorizationException: If the actor is not privileged
            TransactionNotFoundException: If the transaction does not exist
            InvalidStateException: If the transaction is not pending
        """
        self._require_privileged(actor, "reject")

        async with self._store.atomic():
            current = await self._require(transaction_id)
            self._ensure_allowed(current, "reject", TransactionStatus.REJECTED)

            rejected = await self._store.set_transaction_status(
                transaction_id,
                TransactionStatus.REJECTED,
                expected=TransactionStatus.PENDING,
            )
            if rejected is None:
                await self._raise_conflict(transaction_id, "reject")

        record_transition(TransactionStatus.REJECTED.value)
        logger.info(
            "transaction_rejected",
            transaction_id=str(transaction_id),
            actor_id=actor.id,
        )

        return TransactionResponse.from_entity(rejected)

    async def delete(self, transaction_id: UUID, actor: Actor) -> None:
        """
        Delete a transaction at any status.

        Deleting an approved transaction does not reverse its posting.

        Raises:
            TransactionNotFoundException: If the transaction does not exist
            AuthorizationException: If the actor neither owns it nor is privileged
        """
        async with self._store.atomic():
            current = await self._require(transaction_id)
            if not actor.may_modify(current.owner_id):
                raise AuthorizationException(
                    "Only the owner or an admin may delete this transaction"
                )
            await self._store.delete_transaction(transaction_id)

        log = logger.bind(
            transaction_id=str(transaction_id),
            actor_id=actor.id,
            status=current.status.value,
        )
        if current.status is TransactionStatus.APPROVED:
            log.warning(
                "approved_transaction_deleted",
                converted_base_amount=str(current.converted_base_amount),
                balance_reversed=False,
            )
        else:
            log.info("transaction_deleted")

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    async def get(self, transaction_id: UUID, actor: Actor) -> TransactionResponse:
        """
        Retrieve a transaction.

        Raises:
            TransactionNotFoundException: If the transaction does not exist
            AuthorizationException: If a standard actor asks for someone
                else's transaction
        """
        transaction = await self._require(transaction_id)
        if not actor.may_modify(transaction.owner_id):
            raise AuthorizationException("Transaction belongs to another user")
        return TransactionResponse.from_entity(transaction)

    async def list_transactions(
        self,
        actor: Actor,
        company_id: Optional[UUID] = None,
        status: Optional[TransactionStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[TransactionResponse]:
        """
        List transactions, newest first.

        Standard actors only ever see their own submissions.
        """
        period = ReportPeriod(start_date=start_date, end_date=end_date, company_id=company_id)
        errors = period.validate()
        if errors:
            raise ValidationException(errors)

        filters = period.to_filters(
            status=status,
            owner_id=None if actor.is_privileged else actor.id,
        )
        transactions = await self._store.list_transactions(filters)

        logger.info(
            "transactions_listed",
            actor_id=actor.id,
            count=len(transactions),
        )

        return [TransactionResponse.from_entity(t) for t in transactions]

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    async def _post(self, transaction: Transaction, log) -> None:
        """
        Apply the transaction's legs to the latest stored balances.

        Each account row is read under lock immediately before it is written.
        A missing account aborts the whole unit of work instead of posting
        only one side.
        """
        legs = posting_legs(transaction)
        for leg in legs:
            account = await self._store.get_account(leg.account_id, for_update=True)
            if account is None:
                log.error("posting_account_missing", account_id=str(leg.account_id))
                raise AccountNotFoundException(str(leg.account_id))

            balance = apply_leg(account.current_balance, leg)
            await self._store.set_account_balance(leg.account_id, balance)

            log.info(
                "balance_posted",
                account_id=str(leg.account_id),
                delta=str(leg.delta),
                balance=str(balance),
            )

        log.info("transaction_posted", legs=len(legs))

    async def _check_references(self, draft: TransactionDraft) -> None:
        if await self._store.get_company(draft.company_id) is None:
            raise ReferenceNotFoundException("company", str(draft.company_id))
        if draft.category_id and await self._store.get_category(draft.category_id) is None:
            raise ReferenceNotFoundException("category", str(draft.category_id))
        if draft.client_id and await self._store.get_client(draft.client_id) is None:
            raise ReferenceNotFoundException("client", str(draft.client_id))

        for account_id in (draft.from_account_id, draft.to_account_id):
            if account_id and await self._store.get_account(account_id) is None:
                raise AccountNotFoundException(str(account_id))

    async def _require(self, transaction_id: UUID) -> Transaction:
        transaction = await self._store.get_transaction(transaction_id)
        if transaction is None:
            logger.warning("transaction_not_found", transaction_id=str(transaction_id))
            raise TransactionNotFoundException(str(transaction_id))
        return transaction

    def _ensure_allowed(
        self,
        transaction: Transaction,
        operation: str,
        target: Optional[TransactionStatus] = None,
    ) -> None:
        """Edits need a pending transaction; status moves follow ALLOWED_TRANSITIONS."""
        if target is None:
            allowed = transaction.is_pending
        else:
            allowed = transaction.can_transition_to(target)
        if allowed:
            return
        record_state_conflict(operation)
        logger.warning(
            "transaction_state_conflict",
            transaction_id=str(transaction.id),
            operation=operation,
            status=transaction.status.value,
        )
        raise InvalidStateException(str(transaction.id), transaction.status.value, operation)

    async def _raise_conflict(self, transaction_id: UUID, operation: str) -> None:
        """Another writer changed the transaction between our read and write."""
        current = await self._require(transaction_id)
        record_state_conflict(operation)
        logger.warning(
            "approval_conflict",
            transaction_id=str(transaction_id),
            operation=operation,
            status=current.status.value,
        )
        raise InvalidStateException(str(transaction_id), current.status.value, operation)

    @staticmethod
    def _require_privileged(actor: Actor, operation: str) -> None:
        if not actor.is_privileged:
            logger.warning("permission_denied", actor_id=actor.id, operation=operation)
            raise AuthorizationException(f"Admin access required to {operation} transactions")
