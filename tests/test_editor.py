from datetime import datetime
from decimal import Decimal

import pytest

from editor import DepartmentEditor, EditorState, NoActiveEdit
from models import CurrencyCode, Transaction, TransactionType


class RecordingStore:
    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.names = {10: "Travel", 11: "Office"}

    def update_transaction(self, transaction_id, fields):
        self.calls.append(("transaction", transaction_id, fields))

    def update_category(self, category_id, name, department_name):
        self.calls.append(("category", category_id, name, department_name))

    def category_name(self, category_id):
        return self.names.get(category_id, "")


def make_editor(store: RecordingStore) -> DepartmentEditor:
    return DepartmentEditor(
        update_transaction=store.update_transaction,
        update_category=store.update_category,
        category_name=store.category_name,
    )


def make_txn(txn_id: int = 1, category_id: int = 10, department_name=None) -> Transaction:
    return Transaction(
        id=txn_id,
        type=TransactionType.expense,
        amount=Decimal("25.00"),
        currency=CurrencyCode.pln,
        category_id=category_id,
        department_name=department_name,
        date=datetime(2025, 3, 3),
    )


def test_start_edit_seeds_draft_from_current_department() -> None:
    editor = make_editor(RecordingStore())
    assert editor.state == EditorState.idle

    edit = editor.start_edit(make_txn(), "Logistics")

    assert editor.state == EditorState.editing
    assert edit.draft == "Logistics"
    assert edit.apply_to_category is False

    editor.start_edit(make_txn(2), None)
    assert editor.current.transaction_id == 2
    assert editor.current.draft == ""


def test_commit_with_cascade_updates_transaction_and_category() -> None:
    store = RecordingStore()
    editor = make_editor(store)

    editor.start_edit(make_txn(), None)
    editor.update_draft("Sales")
    editor.toggle_apply_to_category(True)
    result = editor.commit()

    assert result == "Sales"
    assert store.calls == [
        ("transaction", 1, {"department_name": "Sales"}),
        ("category", 10, "Travel", "Sales"),
    ]
    assert editor.state == EditorState.idle


def test_commit_trims_draft() -> None:
    store = RecordingStore()
    editor = make_editor(store)

    editor.start_edit(make_txn(), None)
    editor.update_draft("  Sales  ")
    editor.commit()

    assert store.calls == [("transaction", 1, {"department_name": "Sales"})]


def test_cancel_has_no_side_effects() -> None:
    store = RecordingStore()
    editor = make_editor(store)

    editor.start_edit(make_txn(), None)
    editor.update_draft("Sales")
    editor.toggle_apply_to_category(True)
    editor.cancel()

    assert store.calls == []
    assert editor.state == EditorState.idle
    assert editor.current is None


def test_clearing_override_without_cascade() -> None:
    store = RecordingStore()
    editor = make_editor(store)

    editor.start_edit(make_txn(department_name="Sales"), "Sales")
    editor.update_draft("")
    result = editor.commit()

    assert result is None
    assert store.calls == [("transaction", 1, {"department_name": None})]


def test_clearing_with_cascade_clears_category_default() -> None:
    store = RecordingStore()
    editor = make_editor(store)

    editor.start_edit(make_txn(category_id=11), "Sales")
    editor.update_draft("   ")
    editor.toggle_apply_to_category(True)
    editor.commit()

    assert store.calls == [
        ("transaction", 1, {"department_name": None}),
        ("category", 11, "Office", None),
    ]


def test_starting_new_edit_discards_previous_one() -> None:
    store = RecordingStore()
    editor = make_editor(store)

    editor.start_edit(make_txn(1), None)
    editor.update_draft("Sales")
    editor.toggle_apply_to_category(True)
    editor.start_edit(make_txn(2, category_id=11), "Office")
    editor.commit()

    assert store.calls == [("transaction", 2, {"department_name": "Office"})]


def test_operations_without_active_edit_raise() -> None:
    store = RecordingStore()
    editor = make_editor(store)

    with pytest.raises(NoActiveEdit):
        editor.update_draft("Sales")
    with pytest.raises(NoActiveEdit):
        editor.toggle_apply_to_category(True)
    with pytest.raises(NoActiveEdit):
        editor.commit()
    editor.cancel()
    assert store.calls == []


def test_failed_commit_keeps_edit_open() -> None:
    store = RecordingStore()

    def failing_update(category_id, name, department_name):
        raise ValueError("Category not found")

    editor = DepartmentEditor(
        update_transaction=store.update_transaction,
        update_category=failing_update,
        category_name=store.category_name,
    )
    editor.start_edit(make_txn(), None)
    editor.update_draft("Sales")
    editor.toggle_apply_to_category(True)

    with pytest.raises(ValueError):
        editor.commit()

    assert editor.state == EditorState.editing
    assert editor.current.draft == "Sales"
