"""Session state for the expense screen.

The controller owns the only copy of the UI state. The presentation layer
sends events to ``ExpenseController.dispatch`` and renders the state it
gets back; it never mutates anything itself.
"""

import asyncio
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Callable

from errors import ExpenseError, ExpenseNotFoundError, StorageError, ValidationError
from models import Expense, Summary, Window
from utils.date_utils import today_string
from utils.logging import logger
from utils.summary import summarize
from utils.validation import validate_expense


@dataclass(frozen=True)
class ExpenseForm:
    """Raw text of the add/edit form."""

    amount: str = ""
    category: str = ""
    note: str = ""

    @classmethod
    def from_expense(cls, expense: Expense) -> "ExpenseForm":
        amount = expense.amount
        amount_text = str(int(amount)) if float(amount).is_integer() else str(amount)
        return cls(amount=amount_text, category=expense.category, note=expense.note or "")


@dataclass(frozen=True)
class ExpenseState:
    records: tuple[Expense, ...] = ()
    window: Window = Window.ALL
    editing_id: int | None = None
    form: ExpenseForm = field(default_factory=ExpenseForm)
    error: ExpenseError | None = None
    summary: Summary = field(default_factory=lambda: Summary(window=Window.ALL))

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None

    @property
    def mode(self) -> str:
        return "editing" if self.is_editing else "idle"

    def find(self, expense_id: int) -> Expense | None:
        for record in self.records:
            if record.id == expense_id:
                return record
        return None


# Events sent by the presentation layer


@dataclass(frozen=True)
class Load:
    pass


@dataclass(frozen=True)
class ChooseWindow:
    window: Window


@dataclass(frozen=True)
class Submit:
    amount: str
    category: str
    note: str = ""


@dataclass(frozen=True)
class Select:
    expense_id: int


@dataclass(frozen=True)
class Cancel:
    pass


@dataclass(frozen=True)
class Delete:
    expense_id: int


class ExpenseController:
    """Drives the store, the window filter and the aggregator from UI events."""

    def __init__(self, store, clock: Callable[[], datetime] = datetime.now):
        self.store = store
        self.clock = clock
        self._state = ExpenseState()
        self._lock = asyncio.Lock()

    @property
    def state(self) -> ExpenseState:
        return self._state

    def summarize(self, state: ExpenseState) -> Summary:
        return summarize(state.records, state.window, self.clock())

    async def dispatch(self, event) -> ExpenseState:
        """Apply one event and return the resulting state.

        Validation and lookup failures come back in ``state.error``.
        Storage failures are raised and leave the current state untouched.
        """
        async with self._lock:
            logger.debug(f"Dispatching {event!r} in {self._state.mode} mode")
            try:
                new_state = await self._handle(self._state, event)
            except StorageError as e:
                logger.error(f"Store failure while handling {type(event).__name__}: {e}")
                raise
            self._state = replace(new_state, summary=self.summarize(new_state))
            return self._state

    async def _handle(self, state: ExpenseState, event) -> ExpenseState:
        if isinstance(event, Load):
            return await self._reload(replace(state, error=None))
        if isinstance(event, ChooseWindow):
            return replace(state, window=Window(event.window), error=None)
        if isinstance(event, Submit):
            return await self._submit(state, event)
        if isinstance(event, Select):
            return self._select(state, event.expense_id)
        if isinstance(event, Cancel):
            logger.info(f"Edit of expense {state.editing_id} canceled")
            return replace(state, editing_id=None, form=ExpenseForm(), error=None)
        if isinstance(event, Delete):
            return await self._delete(state, event.expense_id)
        raise TypeError(f"Unknown event: {event!r}")

    async def _reload(self, state: ExpenseState) -> ExpenseState:
        records = await self.store.list_all()
        return replace(state, records=tuple(records))

    async def _submit(self, state: ExpenseState, event: Submit) -> ExpenseState:
        form = ExpenseForm(amount=event.amount, category=event.category, note=event.note)
        try:
            expense = validate_expense(event.amount, event.category, event.note)
        except ValidationError as e:
            logger.info(f"Rejected expense input ({e.kind}): {e}")
            return replace(state, form=form, error=e)

        existing = state.find(state.editing_id) if state.is_editing else None
        # The stored date never changes on edit
        date = existing.date if existing and existing.date else today_string(self.clock())

        if state.is_editing:
            await self.store.update(
                state.editing_id, expense.amount, expense.category, expense.note, date
            )
        else:
            await self.store.create(expense.amount, expense.category, expense.note, date)

        return await self._reload(replace(state, editing_id=None, form=ExpenseForm(), error=None))

    def _select(self, state: ExpenseState, expense_id: int) -> ExpenseState:
        expense = state.find(expense_id)
        if expense is None:
            logger.warning(f"Cannot edit expense {expense_id}: not in the loaded list")
            return replace(state, error=ExpenseNotFoundError(f"Expense {expense_id} not found"))
        logger.info(f"Editing expense {expense_id}")
        return replace(
            state, editing_id=expense_id, form=ExpenseForm.from_expense(expense), error=None
        )

    async def _delete(self, state: ExpenseState, expense_id: int) -> ExpenseState:
        await self.store.delete(expense_id)
        if state.editing_id == expense_id:
            state = replace(state, editing_id=None, form=ExpenseForm())
        return await self._reload(replace(state, error=None))
