import io
from datetime import datetime

import pytest
from reportlab.pdfgen import canvas
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import create_tables  # registra todos los modelos con Base
from database import Base
from certmgmt.accounts.models.account import Account, UserRole
from certmgmt.auth.requester import Requester
from certmgmt.certificates.models.certificate import Certificate
from certmgmt.common.blob_store import LocalBlobStore
from certmgmt.common.codec import PayloadCodec
from certmgmt.common.pdf_watermark import PdfWatermarker

TEST_SECRET = "test-qr-secret"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def session():
    Base.metadata.drop_all(bind=engine)
    create_tables.create_tables(bind=engine)
    db = TestingSessionLocal()
    yield db
    db.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def blob_store(tmp_path):
    return LocalBlobStore(str(tmp_path / "blobs"))


@pytest.fixture
def codec():
    return PayloadCodec(TEST_SECRET)


@pytest.fixture
def watermarker(codec):
    return PdfWatermarker(codec)


def create_dummy_pdf_bytes(pages=1, text="PDF para test"):
    buf = io.BytesIO()
    c = canvas.Canvas(buf)
    for number in range(pages):
        c.drawString(50, 750, f"{text} - página {number + 1}")
        c.showPage()
    c.save()
    buf.seek(0)
    return buf.read()


@pytest.fixture
def example_pdf():
    return create_dummy_pdf_bytes()


def create_dummy_account(session, account_id, role=UserRole.USER, email=None):
    account = Account(
        account_id=account_id,
        name=f"Account {account_id}",
        email_address=email or f"{account_id}@mail.com",
        job_position="Tester",
        user_role=role,
        active=True,
        verified=True
    )
    session.add(account)
    session.commit()
    return account


def create_dummy_certificate(session, certificate_id="cert-1", owner_id="owner-1"):
    certificate = Certificate(
        certificate_id=certificate_id,
        issuer_id="issuer-1",
        owner_id=owner_id,
        requester_id="requester-1",
        sample_id="sample-1",
        product="Tomatoes",
        created_at=datetime(2024, 3, 1, 10, 15, 30, 123000)
    )
    session.add(certificate)
    session.commit()
    return certificate


def requester(account_id, role=UserRole.USER):
    return Requester(account_id=account_id, role=role)
