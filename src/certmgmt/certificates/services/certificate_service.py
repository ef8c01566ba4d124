import logging
from typing import List

from sqlalchemy.orm import Session

from certmgmt.accounts.models.account import Account, UserRole
from certmgmt.auth.requester import Requester
from certmgmt.certificates.models.certificate import Certificate
from certmgmt.certificates.models.comment import Comment
from certmgmt.certificates.models.signer import Signer
from certmgmt.certificates.schemas.certificate_schemas import (
    CertificateHistory, SignedSigner, SignerCreate, Transaction
)
from certmgmt.common.hashing import generate_hash, normalize_email, timestamp_ms, to_iso, utc_now
from certmgmt.common.store import KeyedStore
from certmgmt.documents.models.document import Document, DocumentStatus
from certmgmt.errors import ConflictError, ForbiddenError, NotFoundError

logger = logging.getLogger(__name__)


class CertificateService:

    def __init__(self, db_session: Session):
        self.accounts = KeyedStore(db_session, Account)
        self.certificates = KeyedStore(db_session, Certificate)
        self.comments = KeyedStore(db_session, Comment)
        self.signers = KeyedStore(db_session, Signer)
        self.documents = KeyedStore(db_session, Document)

    def enroll_signer(
        self,
        requester: Requester,
        certificate_id: str,
        signer: SignerCreate,
        signed: bool = False
    ) -> str:
        """
        Registra un firmante para el certificado y retorna su account_id.
        Si el firmante no tiene cuenta se crea una cuenta mínima con rol 'signer'.
        """
        self._check_existing_certificate(requester, certificate_id)

        email = normalize_email(signer.email_address)
        signer_id = generate_hash(certificate_id, email)

        if self.signers.exists(signer_id):
            raise ConflictError("This signer is already added to this certificate.")

        account_id = signer.account_id or generate_hash(email)
        try:
            account = self.accounts.find_by_id(account_id)
        except NotFoundError:
            account = self.accounts.create(Account(
                account_id=account_id,
                name=signer.name,
                email_address=email,
                user_role=UserRole.SIGNER,
                job_position="Signer",
                active=True,
                verified=True
            ))
            logger.info("Created signer account %s", account_id)

        self.signers.create(Signer(
            signer_id=signer_id,
            certificate_id=certificate_id,
            account_id=account.account_id,
            name=account.name,
            email_address=account.email_address,
            signed=signed,
            signed_on=utc_now() if signed else None
        ))
        logger.info("Signer %s enrolled on certificate %s", account.account_id, certificate_id)
        return account.account_id

    def add_admin_signer(self, issuer: Requester, certificate_id: str) -> str:
        """Enrolls the issuer itself as an already-signed signer"""
        admin = self.accounts.find_by_id(issuer.account_id)
        signer = SignerCreate.model_construct(
            account_id=admin.account_id,
            name=admin.name,
            email_address=admin.email_address
        )
        return self.enroll_signer(issuer, certificate_id, signer, signed=True)

    def get_signers(self, requester: Requester, certificate_id: str) -> List[Signer]:
        self._check_existing_certificate(requester, certificate_id)
        return self.signers.find(Signer.certificate_id == certificate_id)

    def sign_certificate(self, requester: Requester, certificate_id: str) -> bool:
        """
        Marks the requester's signature. Once every signer has signed, the
        owner's documents still awaiting signatures become signed.
        """
        certificate = self.certificates.find_by_id(certificate_id)

        signer = self.signers.find_one(
            Signer.certificate_id == certificate_id,
            Signer.account_id == requester.account_id
        )
        if signer is None:
            raise NotFoundError("You are not a signer of this certificate.")
        if signer.signed:
            raise ConflictError("You already signed this certificate before.")

        self.signers.update_by_id(signer.signer_id, {"signed": True, "signed_on": utc_now()})

        pending = self.signers.count(
            Signer.certificate_id == certificate_id,
            Signer.signed.is_(False)
        )
        if pending == 0:
            completed = self.documents.update_all(
                {"status": DocumentStatus.SIGNED},
                Document.owner_id == certificate.owner_id,
                Document.status == DocumentStatus.SENT
            )
            logger.info(
                "Certificate %s fully signed, %d documents marked signed",
                certificate_id, completed
            )
        return True

    def add_comment(self, requester: Requester, certificate_id: str, comment: str) -> str:
        self._check_existing_certificate(requester, certificate_id)

        comment_id = generate_hash(certificate_id, comment, timestamp_ms())
        self.comments.create(Comment(
            comment_id=comment_id,
            certificate_id=certificate_id,
            account_id=requester.account_id,
            comment=comment,
            created_at=utc_now()
        ))
        return comment_id

    def list_comments(self, requester: Requester, certificate_id: str) -> List[Comment]:
        self._check_existing_certificate(requester, certificate_id)
        return self.comments.find(
            Comment.certificate_id == certificate_id,
            order_by=[Comment.created_at.desc()]
        )

    def get_history(self, requester: Requester, certificate_id: str) -> CertificateHistory:
        certificate = self._check_existing_certificate(requester, certificate_id)

        signed = [
            SignedSigner(name=s.name, email=s.email_address, signed_on=s.signed_on)
            for s in self.signers.find(Signer.certificate_id == certificate_id)
            if s.signed
        ]
        created = Transaction(
            transaction_id=generate_hash(certificate_id, timestamp_ms()),
            title="Certificate Created",
            description=(
                f"Certificate created with id {certificate.certificate_id} "
                f"at {to_iso(certificate.created_at)}"
            )
        )
        return CertificateHistory(signers=signed, transactions=[created])

    def _check_existing_certificate(self, requester: Requester, certificate_id: str) -> Certificate:
        certificate = self.certificates.find_by_id(certificate_id)

        if not requester.is_internal and requester.account_id != certificate.owner_id:
            raise ForbiddenError("You don't have permission to access this resource.")

        return certificate
