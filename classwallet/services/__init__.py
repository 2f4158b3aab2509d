"""Business logic services."""

from classwallet.services.student_directory import StudentDirectory
from classwallet.services.wallet_service import WalletService
from classwallet.services.session_manager import SessionManager
from classwallet.services.poll_client import PollClient

__all__ = ["StudentDirectory", "WalletService", "SessionManager", "PollClient"]
