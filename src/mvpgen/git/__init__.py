"""Git operations for mvp-gen."""

from mvpgen.git.checkout import SSH_HINT, RepositoryCheckout

__all__ = [
    "SSH_HINT",
    "RepositoryCheckout",
]
