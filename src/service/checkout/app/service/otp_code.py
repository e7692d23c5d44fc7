import hashlib
import hmac
import secrets

from src.platform.config.core_setting import settings


def generate_code(length: int | None = None) -> str:
    digits = length or settings.OTP_CODE_LENGTH
    return f'{secrets.randbelow(10**digits):0{digits}d}'


def hash_code(*, contact: str, code: str) -> str:
    # Keyed so a leaked attempts table cannot be brute-forced offline
    key = settings.SECRET_KEY.get_secret_value().encode('utf-8')
    return hmac.new(key, f'{contact}:{code}'.encode('utf-8'), hashlib.sha256).hexdigest()


def code_matches(*, contact: str, code: str, code_hash: str) -> bool:
    return hmac.compare_digest(hash_code(contact=contact, code=code.strip()), code_hash)
