from dataclasses import dataclass

from certmgmt.errors import CodecError

DELIMITER = "||"


@dataclass(frozen=True)
class VerificationPayload:
    owner_id: str
    document_id: str
    created_at: str
    signers_count: int

    def serialize(self) -> str:
        return DELIMITER.join(
            [self.owner_id, self.document_id, self.created_at, str(self.signers_count)]
        )

    @classmethod
    def parse(cls, raw: str) -> "VerificationPayload":
        # owner_id is the only free-form field, so it keeps any extra delimiters
        fields = raw.rsplit(DELIMITER, 3)
        if len(fields) != 4:
            raise CodecError("Malformed verification payload")
        owner_id, document_id, created_at, signers_count = fields
        try:
            count = int(signers_count)
        except ValueError as e:
            raise CodecError("Malformed signer count in verification payload") from e
        return cls(owner_id, document_id, created_at, count)
