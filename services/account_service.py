"""
services/account_service.py
----------------------------
Business logic for accounts: signup, login, profile edits and school discovery.
Orchestrates the AccountRepository and password hashing.
"""

from dataclasses import replace
from typing import Any, Optional

from models.account import EDITABLE_FIELDS, ROLE_SCHOOL, ROLES, Account
from repositories.account_repo import AccountRepository
from security.passwords import hash_password, verify_password
from utils.errors import InvalidCredentialsError, NotFoundError, ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)


class AccountService:
    """
    Handles all business logic related to accounts.

    Workflow for signup:
        1. Reject the draft if its email is already registered.
        2. Hash the password.
        3. Persist via the repository.
    """

    def __init__(self):
        self.repo = AccountRepository()

    # ── CORE OPERATIONS ───────────────────────────────────

    def create_account(self, draft: Account) -> Account:
        """
        Persist a role-tagged draft as-is.

        Fields without a value are omitted from the stored record. Email
        uniqueness is the caller's job (see `register`).
        """
        return self.repo.add(draft)

    def find_account_by_email(self, email: str) -> Optional[Account]:
        return self.repo.get_by_email(email)

    def find_account_by_id(self, account_id: str) -> Optional[Account]:
        return self.repo.get_by_id(account_id)

    def authenticate(self, email: str, password: str) -> Optional[Account]:
        """
        Return the account for these credentials, or None.

        An unknown email and a wrong password give the same result.
        """
        account = self.repo.get_by_email(email)
        if account and verify_password(password, account.password):
            return account
        return None

    def update_account_fields(self, account_id: str, **fields: Any) -> None:
        """
        Merge the provided fields into the stored account. None values are
        dropped; values are not validated.

        Raises:
            NotFoundError: If the account does not exist.
            ValidationError: If a field name is not an account attribute.
        """
        try:
            updated = self.repo.update_fields(account_id, fields)
        except KeyError as e:
            raise ValidationError(str(e.args[0])) from e
        if not updated:
            raise NotFoundError(f"Account {account_id} not found.")

    def list_school_accounts(self) -> list[Account]:
        return self.repo.list_by_role(ROLE_SCHOOL)

    def list_schools_by_city(self, substring: str) -> list[Account]:
        """Schools whose city contains `substring`, ignoring case."""
        needle = substring.lower()
        return [
            school for school in self.list_school_accounts()
            if school.city and needle in school.city.lower()
        ]

    # ── SIGNUP / LOGIN ────────────────────────────────────

    def register(self, draft: Account) -> Account:
        """
        Sign up a new account.

        Args:
            draft: Account with the plaintext password in `password`; left unchanged.

        Returns:
            The persisted account (password field holds the hash).

        Raises:
            ValidationError: On missing fields, unknown role or taken email.
        """
        if draft.role not in ROLES:
            raise ValidationError(f"Unknown account type '{draft.role}'.")
        if not draft.name or not draft.email or not draft.password:
            raise ValidationError("Name, email and password are required.")
        school_name = draft.school_name
        if draft.role == ROLE_SCHOOL and not school_name:
            school_name = draft.name

        if self.repo.get_by_email(draft.email):
            raise ValidationError("An account with this email already exists. Please /login.")

        account = self.create_account(
            replace(draft, password=hash_password(draft.password), school_name=school_name)
        )
        logger.info(f"Registered {account.role} account {account.id}")
        return account

    def login(self, email: str, password: str) -> Account:
        """
        Authenticate and return the account.

        Raises:
            InvalidCredentialsError: If `authenticate` finds no match.
        """
        account = self.authenticate(email, password)
        if account is None:
            logger.info("Failed login attempt")
            raise InvalidCredentialsError()
        return account

    # ── PROFILE ───────────────────────────────────────────

    def update_profile(self, account: Account, **changes: Any) -> Account:
        """
        Apply a profile edit and return the refreshed account.

        Only EDITABLE_FIELDS are accepted. For school accounts a new `name`
        is also written to `school_name`.

        Raises:
            ValidationError: On a non-editable field or an empty change set.
            NotFoundError: If the account no longer exists.
        """
        changes = {field: value for field, value in changes.items() if value is not None}
        if not changes:
            raise ValidationError("Nothing to update.")
        not_editable = set(changes) - set(EDITABLE_FIELDS)
        if not_editable:
            raise ValidationError(f"Can't edit: {', '.join(sorted(not_editable))}.")
        if account.is_school() and "name" in changes:
            changes["school_name"] = changes["name"]

        self.update_account_fields(account.id, **changes)
        refreshed = self.repo.get_by_id(account.id)
        if refreshed is None:
            raise NotFoundError(f"Account {account.id} not found.")
        return refreshed

    # ── DISCOVERY ─────────────────────────────────────────

    def search_schools(self, query: str = "") -> list[Account]:
        """Schools whose name, school name or city contains `query`, ignoring case."""
        schools = self.list_school_accounts()
        needle = query.strip().lower()
        if not needle:
            return schools
        return [
            school for school in schools
            if any(
                value and needle in value.lower()
                for value in (school.name, school.city, school.school_name)
            )
        ]

    def get_school(self, school_id: str) -> Account:
        """
        Fetch a school account by id.

        Raises:
            NotFoundError: If there is no school with this id.
        """
        account = self.repo.get_by_id(school_id)
        if account is None or not account.is_school():
            raise NotFoundError(f"No school with id {school_id}.")
        return account
