"""Account repository implementation."""

from typing import List, Optional, Sequence

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from mediahub.core.auth.entities import Account
from mediahub.core.auth.exceptions import UserAlreadyExistsException
from mediahub.core.auth.interfaces import CredentialStoreInterface
from mediahub.core.services.auth.models import AccountModel


class SqlAccountRepository(CredentialStoreInterface):
    """SQLAlchemy implementation of the credential store."""

    def __init__(self, session: AsyncSession):
        """
        Initialize account repository.

        Args:
            session: Database session
        """
        self._session = session

    async def get_account_by_id(self, account_id: int) -> Optional[Account]:
        """
        Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity if found, None otherwise
        """
        result = await self._session.execute(
            select(AccountModel).where(AccountModel.id == account_id)
        )
        account_model = result.scalar_one_or_none()

        if account_model:
            return self._model_to_entity(account_model)
        return None

    async def get_account_by_username(self, username: str) -> Optional[Account]:
        """
        Get account by username.

        Args:
            username: Lower-case username

        Returns:
            Account entity if found, None otherwise
        """
        result = await self._session.execute(
            select(AccountModel).where(AccountModel.username == username)
        )
        account_model = result.scalar_one_or_none()

        if account_model:
            return self._model_to_entity(account_model)
        return None

    async def get_account_by_email(self, email: str) -> Optional[Account]:
        """
        Get account by email.

        Args:
            email: Email address

        Returns:
            Account entity if found, None otherwise
        """
        result = await self._session.execute(
            select(AccountModel).where(AccountModel.email == email)
        )
        account_model = result.scalar_one_or_none()

        if account_model:
            return self._model_to_entity(account_model)
        return None

    async def get_accounts(self, account_ids: Sequence[int]) -> List[Account]:
        """Get all existing accounts among the given IDs."""
        if not account_ids:
            return []
        result = await self._session.execute(
            select(AccountModel).where(AccountModel.id.in_(list(account_ids)))
        )
        return [self._model_to_entity(model) for model in result.scalars().all()]

    async def create_account(self, account: Account) -> Account:
        """
        Create new account.

        Args:
            account: Account entity to create

        Returns:
            Created account entity with ID

        Raises:
            UserAlreadyExistsException: If username or email already exists
        """
        account_model = AccountModel(
            username=account.username,
            email=account.email,
            full_name=account.full_name,
            avatar_url=account.avatar_url,
            cover_image_url=account.cover_image_url,
            hashed_password=account.hashed_password,
        )

        try:
            self._session.add(account_model)
            await self._session.flush()
            await self._session.refresh(account_model)
            return self._model_to_entity(account_model)
        except IntegrityError:
            await self._session.rollback()
            raise UserAlreadyExistsException(account.username)

    async def update_profile(
        self,
        account_id: int,
        full_name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Optional[Account]:
        """
        Update profile fields.

        Raises:
            UserAlreadyExistsException: If the new email is taken
        """
        values = {}
        if full_name is not None:
            values["full_name"] = full_name
        if email is not None:
            values["email"] = email

        if values:
            try:
                await self._session.execute(
                    update(AccountModel)
                    .where(AccountModel.id == account_id)
                    .values(**values)
                )
                await self._session.flush()
            except IntegrityError:
                await self._session.rollback()
                raise UserAlreadyExistsException(email or str(account_id))

        return await self._get_fresh(account_id)

    async def replace_avatar(
        self, account_id: int, expected: Optional[str], new: str
    ) -> bool:
        return await self._replace_url(AccountModel.avatar_url, account_id, expected, new)

    async def replace_cover_image(
        self, account_id: int, expected: Optional[str], new: str
    ) -> bool:
        return await self._replace_url(AccountModel.cover_image_url, account_id, expected, new)

    async def _replace_url(
        self, column, account_id: int, expected: Optional[str], new: str
    ) -> bool:
        """Swap an image URL only if it still holds the value the caller read."""
        matches = column.is_(None) if expected is None else column == expected
        result = await self._session.execute(
            update(AccountModel)
            .where(AccountModel.id == account_id, matches)
            .values({column: new})
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def update_password(self, account_id: int, hashed_password: str) -> bool:
        result = await self._session.execute(
            update(AccountModel)
            .where(AccountModel.id == account_id)
            .values(hashed_password=hashed_password)
        )
        return result.rowcount > 0

    async def set_refresh_token(self, account_id: int, token: str) -> bool:
        result = await self._session.execute(
            update(AccountModel)
            .where(AccountModel.id == account_id)
            .values(refresh_token=token)
        )
        return result.rowcount > 0

    async def replace_refresh_token(
        self, account_id: int, expected: str, new: str
    ) -> bool:
        """
        Compare-and-swap the stored refresh token.

        The precondition lives in the WHERE clause, so of two concurrent
        rotations presenting the same token exactly one matches a row.
        """
        result = await self._session.execute(
            update(AccountModel)
            .where(
                AccountModel.id == account_id,
                AccountModel.refresh_token == expected,
            )
            .values(refresh_token=new)
        )
        return result.rowcount == 1

    async def clear_refresh_token(self, account_id: int) -> None:
        await self._session.execute(
            update(AccountModel)
            .where(AccountModel.id == account_id)
            .values(refresh_token=None)
        )

    async def _get_fresh(self, account_id: int) -> Optional[Account]:
        result = await self._session.execute(
            select(AccountModel)
            .where(AccountModel.id == account_id)
            .execution_options(populate_existing=True)
        )
        account_model = result.scalar_one_or_none()
        return self._model_to_entity(account_model) if account_model else None

    def _model_to_entity(self, model: AccountModel) -> Account:
        """
        Convert database model to domain entity.

        Args:
            model: Account database model

        Returns:
            Account domain entity
        """
        return Account(
            id=model.id,
            username=model.username,
            email=model.email,
            hashed_password=model.hashed_password,
            full_name=model.full_name,
            avatar_url=model.avatar_url,
            cover_image_url=model.cover_image_url,
            refresh_token=model.refresh_token,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
