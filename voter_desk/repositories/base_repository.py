"""
Base repository classes standardizing error handling and logging
"""

from collections.abc import Callable
from typing import Any, Generic, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from voter_desk.database import db
from voter_desk.shared.logging_config import get_project_logger

# Generic type for model classes
ModelType = TypeVar('ModelType')


class BaseRepository:
    """
    Base repository class providing common functionality for all repositories

    Features:
    - Standard error handling with rollback
    - Consistent logging setup
    - Transaction management (flush here, commit in the caller)
    """

    def __init__(self, db_session=None):
        """Initialize base repository with database session and logger"""
        self.db_session = db_session or db.session
        self.logger = get_project_logger(self.__class__.__name__)

    def safe_operation(self, operation: Callable[[], Any], operation_name: str = "operation") -> Any:
        """
        Execute database operation with standard error handling

        Args:
            operation: Function to execute (should return result)
            operation_name: Description for logging purposes

        Returns:
            Result of the operation

        Raises:
            Exception: Re-raises original exception after logging and rollback
        """
        try:
            result = operation()
            self.db_session.flush()
            self.logger.debug(f"Repository {operation_name} completed successfully")
            return result
        except SQLAlchemyError as e:
            self.db_session.rollback()
            self.logger.error(f"Database error in {operation_name}: {e}")
            raise
        except Exception as e:
            self.db_session.rollback()
            self.logger.error(f"Repository {operation_name} failed: {e}")
            raise

    def safe_query(self, query_func: Callable[[], Any], operation_name: str = "query") -> Any:
        """
        Execute read-only query with error handling (no flush needed)

        Args:
            query_func: Function to execute query
            operation_name: Description for logging purposes

        Returns:
            Query result
        """
        try:
            result = query_func()
            self.logger.debug(f"Repository {operation_name} completed successfully")
            return result
        except Exception as e:
            self.logger.error(f"Repository {operation_name} failed: {e}")
            raise


class ModelRepository(BaseRepository, Generic[ModelType]):
    """Generic repository for reads over one model type"""

    def __init__(self, model_class: type[ModelType], db_session=None):
        super().__init__(db_session)
        self.model_class = model_class

    def get_all(self) -> list[ModelType]:
        """Get all instances in insertion order"""
        def _get_all():
            return self.db_session.execute(
                db.select(self.model_class).order_by(self.model_class.id)
            ).scalars().all()

        return self.safe_query(_get_all, f"get all {self.model_class.__name__}")

    def count(self) -> int:
        def _count():
            return self.db_session.execute(
                db.select(db.func.count()).select_from(self.model_class)
            ).scalar_one()

        return self.safe_query(_count, f"count {self.model_class.__name__}")
