from dataclasses import dataclass
from typing import Optional
from fastapi import APIRouter, Depends, File, Query, Request, Response, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile as FormFile

from app.config import settings
from app.core.exceptions import ValidationException
from app.database import get_db
from app.dependencies import get_tenant_context
from app.models.policy import PolicyType, BeneficiaryType, PolicyStatus
from app.models.tenant_context import TenantContext
from app.services.document_storage import (
    DocumentStorage,
    UploadedDocument,
    get_document_storage,
)
from app.services.policy_service import PolicyService
from app.schemas.policy_schemas import PolicyCreate, PolicyUpdate, PolicyResponse

router = APIRouter()

DOCUMENT_FIELD = "document"
FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


@dataclass
class PolicySubmission:
    """Validated policy fields plus the optional accompanying document"""

    data: PolicyCreate | PolicyUpdate
    document: UploadedDocument | None = None


async def read_upload(upload: FormFile) -> UploadedDocument:
    """
    Read an uploaded file into memory.

    Never reads more than MAX_UPLOAD_SIZE_BYTES + 1 bytes; a declared size
    over the limit is rejected before reading anything.

    Raises:
        ValidationException: If the file is over the size limit
    """
    limit = settings.MAX_UPLOAD_SIZE_BYTES
    if upload.size is not None and upload.size > limit:
        raise ValidationException(f"File too large (max {limit} bytes)")

    content = await upload.read(limit + 1)
    if len(content) > limit:
        raise ValidationException(f"File too large (max {limit} bytes)")
    return UploadedDocument(upload.filename, content, upload.content_type)


def _validate(schema: type[BaseModel], payload) -> BaseModel:
    try:
        return schema.model_validate(payload)
    except ValidationError as e:
        errors = [{**error, "loc": ("body", *error["loc"])} for error in e.errors()]
        raise RequestValidationError(errors) from e


async def _read_submission(request: Request, schema: type[BaseModel]) -> PolicySubmission:
    """
    Parse a policy body sent either as JSON or as a multipart form.

    In a form every field is a text part and the optional file goes in
    the `document` part; a file part without a filename counts as absent.
    """
    content_type = request.headers.get("content-type", "")
    if not content_type.startswith(FORM_CONTENT_TYPES):
        try:
            payload = await request.json()
        except ValueError as e:
            raise RequestValidationError(
                [{"type": "json_invalid", "loc": ("body",), "msg": "Invalid JSON body"}]
            ) from e
        return PolicySubmission(_validate(schema, payload))

    form = await request.form()
    fields = {key: value for key, value in form.items() if key != DOCUMENT_FIELD}

    document = None
    upload = form.get(DOCUMENT_FIELD)
    if isinstance(upload, FormFile):
        try:
            if upload.filename:
                document = await read_upload(upload)
        finally:
            await upload.close()

    return PolicySubmission(_validate(schema, fields), document)


async def policy_create_submission(request: Request) -> PolicySubmission:
    return await _read_submission(request, PolicyCreate)


async def policy_update_submission(request: Request) -> PolicySubmission:
    return await _read_submission(request, PolicyUpdate)


async def uploaded_file(file: UploadFile = File(...)) -> UploadedDocument:
    return await read_upload(file)


@router.get("", response_model=list[PolicyResponse])
def list_policies(
    search: Optional[str] = Query(None, description="Free-text search"),
    policy_type: Optional[PolicyType] = Query(None, description="Filter by policy type"),
    beneficiary_type: Optional[BeneficiaryType] = Query(None, description="Filter by beneficiary type"),
    status: Optional[PolicyStatus] = Query(None, description="Filter by derived status"),
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    List the tenant's policies, newest first.

    - `search` matches name, number, provider, nominee, paid-to and country
    - `status` is derived from the maturity date at request time
    """
    service = PolicyService(db)
    return service.list_policies(
        context,
        search=search,
        policy_type=policy_type,
        beneficiary_type=beneficiary_type,
        status=status,
    )


@router.get("/{policy_id}", response_model=PolicyResponse)
def get_policy(
    policy_id: int,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
):
    """
    Get a specific policy by ID.

    - Returns 404 if policy doesn't exist or doesn't belong to tenant
    """
    return PolicyService(db).get_policy(policy_id, context)


@router.post("", response_model=PolicyResponse, status_code=status.HTTP_201_CREATED)
def create_policy(
    context: TenantContext = Depends(get_tenant_context),
    submission: PolicySubmission = Depends(policy_create_submission),
    db: Session = Depends(get_db),
    storage: DocumentStorage = Depends(get_document_storage),
):
    """
    Create a policy.

    - Body is JSON, or a multipart form with an optional `document` file
    - Requires provider, policy_name, policy_type, country and start_date
    - Empty strings in optional fields are stored as null
    - Any client-sent tenant_id is ignored
    """
    return PolicyService(db, storage).create_policy(
        submission.data, context, document=submission.document
    )


@router.put("/{policy_id}", response_model=PolicyResponse)
@router.patch("/{policy_id}", response_model=PolicyResponse, include_in_schema=False)
def update_policy(
    policy_id: int,
    context: TenantContext = Depends(get_tenant_context),
    submission: PolicySubmission = Depends(policy_update_submission),
    db: Session = Depends(get_db),
    storage: DocumentStorage = Depends(get_document_storage),
):
    """
    Update a policy.

    - Body is JSON, or a multipart form with an optional `document` file
    - Only provided fields are updated (partial update)
    - A new document replaces, and deletes, the previous one
    - Returns 404 if policy doesn't exist or doesn't belong to tenant
    """
    return PolicyService(db, storage).update_policy(
        policy_id, submission.data, context, document=submission.document
    )


@router.delete("/{policy_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_policy(
    policy_id: int,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
    storage: DocumentStorage = Depends(get_document_storage),
):
    """
    Delete a policy.

    - Attached document is removed too; a storage failure there does not
      fail the request
    - Returns 404 if policy doesn't exist or doesn't belong to tenant
    """
    PolicyService(db, storage).delete_policy(policy_id, context)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{policy_id}/document", response_model=PolicyResponse)
def upload_document(
    policy_id: int,
    context: TenantContext = Depends(get_tenant_context),
    document: UploadedDocument = Depends(uploaded_file),
    db: Session = Depends(get_db),
    storage: DocumentStorage = Depends(get_document_storage),
):
    """
    Attach a document to the policy (multipart field `file`).

    Replaces, and deletes, any previously attached document.
    """
    return PolicyService(db, storage).attach_document(policy_id, context, document)


@router.get("/{policy_id}/document")
def download_document(
    policy_id: int,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
    storage: DocumentStorage = Depends(get_document_storage),
):
    """Download the policy's document"""
    reference, content = PolicyService(db, storage).read_document(policy_id, context)
    filename = reference.rsplit("/", 1)[-1]
    return Response(
        content=content,
        media_type="application/octet-stream",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.delete("/{policy_id}/document", response_model=PolicyResponse)
def delete_document(
    policy_id: int,
    context: TenantContext = Depends(get_tenant_context),
    db: Session = Depends(get_db),
    storage: DocumentStorage = Depends(get_document_storage),
):
    """Detach and delete the policy's document"""
    return PolicyService(db, storage).remove_document(policy_id, context)
