import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from models import Transaction

logger = logging.getLogger(__name__)

TransactionUpdater = Callable[[int, dict[str, object]], object]
CategoryUpdater = Callable[[Optional[int], str, Optional[str]], object]
CategoryNamer = Callable[[Optional[int]], str]


class EditorState(str, Enum):
    idle = "idle"
    editing = "editing"


class NoActiveEdit(ValueError):
    pass


@dataclass
class DepartmentEdit:
    transaction_id: int
    category_id: Optional[int]
    draft: str
    apply_to_category: bool = False


class DepartmentEditor:
    """Edits the department of one transaction at a time.

    ``commit`` writes the trimmed draft to the transaction and, when the
    cascade flag is set, to the transaction's category as its default.
    Starting a new edit silently drops the one in progress.
    """

    def __init__(
        self,
        update_transaction: TransactionUpdater,
        update_category: CategoryUpdater,
        category_name: CategoryNamer,
    ) -> None:
        self._update_transaction = update_transaction
        self._update_category = update_category
        self._category_name = category_name
        self._edit: Optional[DepartmentEdit] = None

    @property
    def state(self) -> EditorState:
        return EditorState.idle if self._edit is None else EditorState.editing

    @property
    def current(self) -> Optional[DepartmentEdit]:
        return self._edit

    def _require_edit(self) -> DepartmentEdit:
        if self._edit is None:
            raise NoActiveEdit("No department edit in progress")
        return self._edit

    def start_edit(
        self, txn: Transaction, current_department: Optional[str]
    ) -> DepartmentEdit:
        if self._edit is not None:
            logger.debug(
                "department_edit: discarding edit of transaction %s",
                self._edit.transaction_id,
            )
        self._edit = DepartmentEdit(
            transaction_id=txn.id,
            category_id=txn.category_id,
            draft=current_department or "",
        )
        logger.debug("department_edit: started for transaction %s", txn.id)
        return self._edit

    def update_draft(self, text: str) -> None:
        self._require_edit().draft = text

    def toggle_apply_to_category(self, value: bool) -> None:
        self._require_edit().apply_to_category = bool(value)

    def commit(self) -> Optional[str]:
        edit = self._require_edit()
        value = edit.draft.strip() or None

        self._update_transaction(edit.transaction_id, {"department_name": value})
        if edit.apply_to_category:
            name = self._category_name(edit.category_id)
            self._update_category(edit.category_id, name, value)

        logger.debug(
            "department_edit: committed transaction=%s cascade=%s",
            edit.transaction_id,
            edit.apply_to_category,
        )
        self._edit = None
        return value

    def cancel(self) -> None:
        self._edit = None
