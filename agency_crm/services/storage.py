"""
Document storage for invoice and contract PDFs.
Talks to any S3-compatible bucket (Cloudflare R2, Supabase storage, AWS S3).
"""

import logging
from typing import Optional

import boto3
from botocore.client import Config
from botocore.exceptions import ClientError
from fastapi import HTTPException

from ..config import (
    STORAGE_ACCESS_KEY_ID,
    STORAGE_BUCKET_NAME,
    STORAGE_ENDPOINT_URL,
    STORAGE_REGION,
    STORAGE_SECRET_ACCESS_KEY,
    STORAGE_URL_EXPIRATION_MINUTES,
)

logger = logging.getLogger(__name__)

INVOICE_PREFIX = "invoices"
CONTRACT_PREFIX = "contracts"
SIGNED_CONTRACT_PREFIX = "signed-contracts"


def get_storage_client():
    """Get configured boto3 client for the document bucket"""
    return boto3.client(
        "s3",
        endpoint_url=STORAGE_ENDPOINT_URL,
        aws_access_key_id=STORAGE_ACCESS_KEY_ID,
        aws_secret_access_key=STORAGE_SECRET_ACCESS_KEY,
        config=Config(signature_version="s3v4"),
        region_name=STORAGE_REGION,
    )


def upload_document(
    key: str, body: bytes, content_type: str = "application/pdf", client=None
) -> str:
    """Upload a document and return its storage key"""
    s3 = client or get_storage_client()
    try:
        s3.put_object(
            Bucket=STORAGE_BUCKET_NAME,
            Key=key,
            Body=body,
            ContentType=content_type,
        )
    except ClientError as e:
        logger.error(f"❌ Failed to upload {key}: {e}")
        raise HTTPException(status_code=502, detail="Failed to store document") from e

    logger.info(f"✅ Uploaded document to storage: {key}")
    return key


def download_document(key: str, client=None) -> bytes:
    s3 = client or get_storage_client()
    try:
        response = s3.get_object(Bucket=STORAGE_BUCKET_NAME, Key=key)
        return response["Body"].read()
    except ClientError as e:
        logger.error(f"❌ Failed to download {key}: {e}")
        raise HTTPException(status_code=404, detail="Document not found in storage") from e


def generate_document_url(key: str, expiration_minutes: Optional[int] = None, client=None) -> str:
    """Presigned GET URL for a stored document"""
    s3 = client or get_storage_client()
    try:
        return s3.generate_presigned_url(
            "get_object",
            Params={"Bucket": STORAGE_BUCKET_NAME, "Key": key},
            ExpiresIn=(expiration_minutes or STORAGE_URL_EXPIRATION_MINUTES) * 60,
        )
    except ClientError as e:
        logger.error(f"❌ Failed to generate URL for {key}: {e}")
        raise HTTPException(status_code=502, detail="Failed to generate document URL") from e


def invoice_key(invoice_number: str) -> str:
    return f"{INVOICE_PREFIX}/invoice-{invoice_number}.pdf"


def contract_key(kind: str, record_public_id: str) -> str:
    return f"{CONTRACT_PREFIX}/{kind}/{record_public_id}.pdf"


def signed_contract_key(kind: str, record_public_id: str, filename: str) -> str:
    suffix = filename.rsplit(".", 1)[-1].lower() if "." in filename else "pdf"
    return f"{SIGNED_CONTRACT_PREFIX}/{kind}/{record_public_id}.{suffix}"
