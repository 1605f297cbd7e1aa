import re
from typing import Collection, Iterable

from dagger_gha.globals.errors import InvalidSecretName

# Secrets are interpolated as ${{ secrets.NAME }} and exported as env variables
SECRET_NAME = re.compile(r"[A-Za-z0-9_]+")


def is_valid_secret_name(name: str) -> bool:
    return bool(SECRET_NAME.fullmatch(name))


def check_secret_names(names: Iterable[str], reserved: Collection[str] = ()) -> None:
    """Check that every secret name can be exported to the Dagger step.

    A name must contain only alphanumerics and underscores, and must not
    shadow a variable the workflow already sets.

    Args:
        names: Candidate secret names, checked in iteration order.
        reserved: Environment variables the secrets can't be named after.

    Raises:
        InvalidSecretName: For the first name that doesn't match.
    """
    for name in names:
        if not is_valid_secret_name(name):
            raise InvalidSecretName(name)
        if name in reserved:
            raise InvalidSecretName(
                name, "is reserved, the workflow already sets this environment variable"
            )
