"""Contraseñas de usuario: hash bcrypt y verificación."""
import bcrypt

RONDAS_BCRYPT = 12


def hash_password(plain_password: str, rounds: int = RONDAS_BCRYPT) -> str:
    """Hash bcrypt de la contraseña; ``rounds`` es el factor de costo."""
    return bcrypt.hashpw(plain_password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """True si la contraseña coincide con el hash guardado. Un hash vacío o corrupto nunca coincide."""
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False
