import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from app.config import settings
from app.core.exceptions import NotFoundException, ValidationException
from app.models.policy import (
    Policy,
    PolicyType,
    BeneficiaryType,
    PolicyStatus,
    derive_policy_status,
)
from app.models.tenant_context import TenantContext
from app.repositories.policy_repository import PolicyRepository
from app.schemas.policy_schemas import PolicyCreate, PolicyUpdate
from app.services.document_storage import (
    DocumentStorage,
    UploadedDocument,
    reference_belongs_to,
)

logger = logging.getLogger(__name__)


def matches_search(policy: Policy, search: str) -> bool:
    """Case-insensitive substring match over the searchable text fields"""
    needle = search.lower()
    haystack = (
        policy.policy_name,
        policy.policy_number,
        policy.provider,
        policy.nominee,
        policy.paid_to,
        policy.country,
    )
    return any(value and needle in value.lower() for value in haystack)


class PolicyService:
    """Service layer for insurance policy business logic"""

    def __init__(self, db: Session, storage: DocumentStorage | None = None):
        self.db = db
        self.repo = PolicyRepository(db)
        self.storage = storage

    def list_policies(
        self,
        context: TenantContext,
        search: Optional[str] = None,
        policy_type: Optional[PolicyType] = None,
        beneficiary_type: Optional[BeneficiaryType] = None,
        status: Optional[PolicyStatus] = None,
        today: Optional[date] = None,
    ) -> list[Policy]:
        """
        Get the tenant's policies, newest first, with optional filters.

        Filters run here rather than in SQL; a tenant holds at most a
        few hundred policies.

        Args:
            context: Tenant context
            search: Free text matched against name, number, provider,
                nominee, paid-to and country
            policy_type: Exact policy type
            beneficiary_type: Exact beneficiary type
            status: Date-derived status (active / maturing_soon / matured)
            today: Reference date for status (defaults to today)

        Returns:
            Matching policies
        """
        policies = self.repo.get_by_tenant(context.tenant_id)

        if search and search.strip():
            policies = [p for p in policies if matches_search(p, search.strip())]

        if policy_type is not None:
            policies = [p for p in policies if p.policy_type == policy_type]

        if beneficiary_type is not None:
            policies = [p for p in policies if p.beneficiary_type == beneficiary_type]

        if status is not None:
            today = today or date.today()
            policies = [
                p
                for p in policies
                if derive_policy_status(p.maturity_date, today, settings.ATTENTION_WINDOW_DAYS)
                == status
            ]

        return policies

    def get_policy(self, policy_id: int, context: TenantContext) -> Policy:
        """
        Get policy by ID within the caller's tenant.

        Raises:
            NotFoundException: If policy doesn't exist or belongs to another tenant
        """
        policy = self.repo.get_by_id_and_tenant(policy_id, context.tenant_id)
        if not policy:
            raise NotFoundException("Policy not found")
        return policy

    def create_policy(
        self,
        data: PolicyCreate,
        context: TenantContext,
        document: UploadedDocument | None = None,
    ) -> Policy:
        """
        Create a policy owned by the caller's tenant.

        An accompanying document is stored first; if the row cannot be
        written the stored file is discarded again.

        Raises:
            ValidationException: If the document is empty or too large
            StorageException: If the storage backend fails
        """
        policy = Policy(tenant_id=context.tenant_id, **data.model_dump())
        if document is not None:
            policy.document_url = self._store(document, context)

        try:
            policy = self.repo.create(policy)
        except Exception:
            if policy.document_url:
                self._discard_document(policy.document_url)
            raise

        logger.info("Created policy %s in tenant %s", policy.id, context.tenant_id)
        return policy

    def update_policy(
        self,
        policy_id: int,
        data: PolicyUpdate,
        context: TenantContext,
        document: UploadedDocument | None = None,
    ) -> Policy:
        """
        Apply a partial update, optionally replacing the document.

        Only fields present in the request change; tenant_id is immutable.
        A replaced document is deleted best effort after the row is saved.

        Raises:
            NotFoundException: If policy doesn't exist or belongs to another tenant
            ValidationException: If the document is empty or too large
            StorageException: If the storage backend fails
        """
        policy = self.get_policy(policy_id, context)
        # Store before touching the row so a rejected file leaves it unchanged
        reference = self._store(document, context) if document is not None else None

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(policy, field, value)

        previous = None
        if reference is not None:
            previous = policy.document_url
            policy.document_url = reference

        try:
            policy = self.repo.update(policy)
        except Exception:
            if reference is not None:
                self._discard_document(reference)
            raise

        if previous:
            self._discard_document(previous)
        return policy

    def delete_policy(self, policy_id: int, context: TenantContext) -> None:
        """
        Hard delete a policy and, best effort, its document.

        Raises:
            NotFoundException: If policy doesn't exist or belongs to another tenant
        """
        policy = self.get_policy(policy_id, context)
        document = policy.document_url

        self.repo.delete(policy)
        logger.info("Deleted policy %s in tenant %s", policy_id, context.tenant_id)

        if document:
            self._discard_document(document)

    def attach_document(
        self, policy_id: int, context: TenantContext, document: UploadedDocument
    ) -> Policy:
        """
        Store a document for the policy, replacing any previous one.

        Raises:
            NotFoundException: If policy doesn't exist or belongs to another tenant
            ValidationException: If the file is empty or too large
            StorageException: If the storage backend fails
        """
        return self.update_policy(policy_id, PolicyUpdate(), context, document=document)

    def read_document(self, policy_id: int, context: TenantContext) -> tuple[str, bytes]:
        """
        Get the policy's document.

        Returns:
            Tuple of (reference, content)

        Raises:
            NotFoundException: If policy or its document doesn't exist
        """
        policy = self.get_policy(policy_id, context)
        if not policy.document_url:
            raise NotFoundException("Document not found")
        if not reference_belongs_to(policy.document_url, context.tenant_id):
            logger.warning("Policy %s points at a foreign document", policy_id)
            raise NotFoundException("Document not found")
        return policy.document_url, self._storage().read(policy.document_url)

    def remove_document(self, policy_id: int, context: TenantContext) -> Policy:
        """Detach the document from the policy and delete it (best effort)"""
        policy = self.get_policy(policy_id, context)
        if not policy.document_url:
            raise NotFoundException("Document not found")

        previous = policy.document_url
        policy.document_url = None
        policy = self.repo.update(policy)
        self._discard_document(previous)
        return policy

    def _store(self, document: UploadedDocument, context: TenantContext) -> str:
        if not document.content:
            raise ValidationException("Uploaded file is empty")
        if len(document.content) > settings.MAX_UPLOAD_SIZE_BYTES:
            raise ValidationException(
                f"File too large (max {settings.MAX_UPLOAD_SIZE_BYTES} bytes)"
            )
        return self._storage().save(
            context.tenant_id, document.filename, document.content, document.content_type
        )

    def _storage(self) -> DocumentStorage:
        if self.storage is None:
            raise RuntimeError("PolicyService was created without document storage")
        return self.storage

    def _discard_document(self, reference: str) -> None:
        # The owning record is already gone or detached; a leftover blob is
        # only logged.
        if self.storage is None:
            logger.warning("No document storage configured; leaving %s in place", reference)
            return
        try:
            self.storage.delete(reference)
        except Exception:
            logger.warning("Failed to delete document %s", reference, exc_info=True)
