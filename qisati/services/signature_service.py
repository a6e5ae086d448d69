"""
지갑 서명 검증

EthSignatureVerifier는 EIP-191 personal_sign 메시지에서 서명자 주소를 복원해 비교한다.
"""

import logging

logger = logging.getLogger(__name__)


class SignatureVerifier:
    def verify(self, address: str, message: str, signature: str) -> bool:
        raise NotImplementedError


class EthSignatureVerifier(SignatureVerifier):
    def __init__(self) -> None:
        try:
            from eth_account import Account  # type: ignore
            from eth_account.messages import encode_defunct  # type: ignore
        except Exception as e:
            raise RuntimeError("eth-account not installed") from e
        self._account = Account
        self._encode_defunct = encode_defunct

    def verify(self, address: str, message: str, signature: str) -> bool:
        try:
            signable = self._encode_defunct(text=message)
            recovered = self._account.recover_message(signable, signature=signature)
        except Exception as e:
            logger.info(f"[wallet_auth] signature recovery failed: {e}")
            return False
        return recovered.lower() == address.lower()


def get_signature_verifier() -> SignatureVerifier:
    return EthSignatureVerifier()
