"""Item accumulator: folds tagged tokens into raw food components."""

import re
from dataclasses import dataclass, field

from pantryparse.logging_config import get_logger
from pantryparse.normalize.units import UnitKind, classify, is_count_unit, is_measure_unit
from pantryparse.parse.lexicon import is_known_food
from pantryparse.parse.tokenizer import LexClass, Token

logger = get_logger(__name__)

_HAN_RE = re.compile(r"[\u4e00-\u9fff]")


@dataclass
class RawComponent:
    """A spoken item before validation and unit finalization."""

    name: str
    quantity: float | None = None
    unit: str | None = None
    display_unit: str | None = None


@dataclass
class AccumulatorState:
    """Mutable state threaded through one accumulation pass."""

    current_quantity: float | None = None
    current_unit: str | None = None
    current_display_unit: str | None = None
    current_name: str = ""
    pending: list[RawComponent] = field(default_factory=list)
    components: list[RawComponent] = field(default_factory=list)
    # The last component was closed by a number and may still take a weight/volume unit
    provisional: bool = False

    @property
    def has_dangling_amount(self) -> bool:
        return self.current_quantity is not None and self.current_unit is not None

    def reset_current(self) -> None:
        self.current_quantity = None
        self.current_unit = None
        self.current_display_unit = None
        self.current_name = ""


def join_name(left: str, right: str) -> str:
    """Join name fragments; ideographic neighbours are joined without a space."""
    if not left:
        return right
    if _HAN_RE.match(right[:1]) and _HAN_RE.match(left[-1]):
        return left + right
    return f"{left} {right}"


def _is_pure_count(unit: str | None) -> bool:
    unit_class = classify(unit)
    return unit_class is not None and unit_class.kind is UnitKind.COUNT


class ItemAccumulator:
    """
    Left-to-right state machine over tagged tokens.

    Connectors close the current item, numbers start a new one, unit
    spellings attach to the current quantity and everything else extends
    the current name.
    """

    def accumulate(self, tokens: list[Token]) -> list[RawComponent]:
        state = AccumulatorState()
        for token in tokens:
            if token.lex_class is LexClass.CONNECTOR:
                self._on_connector(state)
            elif token.lex_class is LexClass.NUMBER:
                self._on_number(state, token)
            elif classify(token.text) is not None:
                self._on_unit(state, token.text)
            else:
                self._on_noun(state, token.text)
        self._finish(state)
        return state.components

    def _on_connector(self, state: AccumulatorState) -> None:
        if state.current_name:
            self._flush(state)

    def _on_number(self, state: AccumulatorState, token: Token) -> None:
        if state.current_name:
            self._flush(state, provisional=True)
        elif state.has_dangling_amount:
            state.pending.append(
                RawComponent("", state.current_quantity, state.current_unit, state.current_display_unit)
            )
            state.current_unit = None
            state.current_display_unit = None
        state.current_quantity = token.value

    def _on_unit(self, state: AccumulatorState, unit: str) -> None:
        if state.current_unit is None:
            state.current_unit = unit
            state.current_display_unit = unit
        elif _is_pure_count(state.current_unit) and is_measure_unit(unit):
            # "一条鱼两斤" style: the measured amount replaces the piece count
            state.current_unit = unit
            state.current_display_unit = unit
        else:
            state.pending.append(
                RawComponent("", state.current_quantity, state.current_unit, state.current_display_unit)
            )
            state.current_unit = unit
            state.current_display_unit = unit

    def _on_noun(self, state: AccumulatorState, text: str) -> None:
        name = state.current_name
        if name and is_known_food(name) and is_known_food(text) and not is_known_food(join_name(name, text)):
            self._flush(state)
            state.current_name = text
            return
        state.current_name = join_name(name, text)

    def _flush(self, state: AccumulatorState, provisional: bool = False) -> None:
        name = state.current_name
        pending = state.pending
        if (
            len(pending) == 1
            and _is_pure_count(pending[0].unit)
            and is_measure_unit(state.current_unit)
        ):
            pending = []
        for entry in pending:
            state.components.append(RawComponent(name, entry.quantity, entry.unit, entry.display_unit))
        state.components.append(
            RawComponent(name, state.current_quantity, state.current_unit, state.current_display_unit)
        )
        state.pending = []
        state.reset_current()
        state.provisional = provisional

    def _finish(self, state: AccumulatorState) -> None:
        if state.current_name:
            self._flush(state)
            return

        dangling = list(state.pending)
        if state.current_quantity is not None:
            dangling.append(
                RawComponent("", state.current_quantity, state.current_unit, state.current_display_unit)
            )
        state.pending = []
        state.reset_current()
        if not dangling:
            return

        previous = state.components[-1] if state.components else None
        if (
            previous is not None
            and state.provisional
            and is_measure_unit(dangling[-1].unit)
            and (previous.unit is None or is_count_unit(previous.unit))
        ):
            # "one fish two jin": the trailing weight describes the fish
            amount = dangling[-1]
            previous.quantity = amount.quantity
            previous.unit = amount.unit
            previous.display_unit = amount.display_unit
            for extra in dangling[:-1]:
                state.components.insert(
                    len(state.components) - 1,
                    RawComponent(previous.name, extra.quantity, extra.unit, extra.display_unit),
                )
            return

        logger.debug(f"Discarding {len(dangling)} unnamed trailing amount(s)")


def accumulate(tokens: list[Token]) -> list[RawComponent]:
    """Fold tagged tokens into raw components in spoken order."""
    return ItemAccumulator().accumulate(tokens)
