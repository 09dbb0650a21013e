"""Parser facade tying the text stages and the enrichment stage together."""

import re
import uuid
from datetime import date, datetime

from pantryparse.collaborators.base import FoodClassifier, ShelfLifeTable, StorageAdvisor
from pantryparse.collaborators.tables import (
    CategoryShelfLifeTable,
    KeywordFoodClassifier,
    KeywordStorageAdvisor,
)
from pantryparse.config import get_settings
from pantryparse.enrich import EnrichmentOrchestrator, FinalizedComponent
from pantryparse.logging_config import LoggingContext, get_logger
from pantryparse.normalize.corrections import apply_corrections
from pantryparse.normalize.expanders import expand
from pantryparse.normalize.units import finalize_unit
from pantryparse.parse.accumulator import accumulate
from pantryparse.parse.expiration import (
    ExpirationExtractor,
    ExpirationHint,
    extract_purchase_date,
    strip_expiration_phrases,
)
from pantryparse.parse.lexicon import canonical_name
from pantryparse.parse.tokenizer import LexicalTagger, RuleBasedTagger
from pantryparse.parse.validation import validate_name
from pantryparse.schemas import Locale, ParsedFoodItem

logger = get_logger(__name__)

_HAN_RE = re.compile(r"[\u4e00-\u9fff]")

# A component spoken without a number is one of it
DEFAULT_QUANTITY = 1.0


def detect_locale(text: str, default: Locale | str | None = None) -> Locale:
    """Chinese when the text contains Han characters, otherwise the default."""
    if text and _HAN_RE.search(text):
        return Locale.ZH_HANS
    return Locale.coerce(default)


def _spoken_positions(text: str, components: list[FinalizedComponent]) -> list[int | None]:
    """Locate each spoken name in the corrected text, scanning left to right."""
    positions: list[int | None] = []
    cursor = 0
    for component in components:
        found = text.find(component.spoken_name, cursor)
        if found < 0:
            found = text.find(component.spoken_name)
        if found < 0:
            positions.append(None)
            continue
        positions.append(found)
        cursor = found + len(component.spoken_name)
    return positions


def scope_expiration(
    text: str,
    components: list[FinalizedComponent],
    hint: ExpirationHint | None,
) -> None:
    """
    Attach a stated expiration to the item it describes.

    The hint belongs to the item spoken nearest before the phrase; when the
    phrase leads the utterance it belongs to the first item after it.
    """
    if hint is None or not components:
        return
    if len(components) == 1:
        components[0].expiration_date = hint.date
        return

    positions = _spoken_positions(text, components)
    before = [(pos, i) for i, pos in enumerate(positions) if pos is not None and pos < hint.start]
    after = [(pos, i) for i, pos in enumerate(positions) if pos is not None and pos >= hint.start]

    if before:
        target = max(before)[1]
    elif after:
        target = min(after)[1]
    else:
        target = 0
    components[target].expiration_date = hint.date


class FoodItemParser:
    """
    Parse food utterances into inventory records.

    Example:
        parser = FoodItemParser()
        items = await parser.parse("I bought three apples and a bottle of milk")
    """

    def __init__(
        self,
        classifier: FoodClassifier | None = None,
        storage_advisor: StorageAdvisor | None = None,
        shelf_life: ShelfLifeTable | None = None,
        tagger: LexicalTagger | None = None,
        default_locale: Locale | str | None = None,
    ):
        self.classifier = classifier or KeywordFoodClassifier()
        self.storage_advisor = storage_advisor or KeywordStorageAdvisor()
        self.shelf_life = shelf_life or CategoryShelfLifeTable()
        self.tagger = tagger
        self.default_locale = Locale.coerce(default_locale or get_settings().default_locale)
        self._orchestrator = EnrichmentOrchestrator(
            self.classifier, self.storage_advisor, self.shelf_life
        )

    def resolve_locale(self, text: str, locale: Locale | str | None = None) -> Locale:
        if locale:
            return Locale.coerce(locale, self.default_locale)
        return detect_locale(text, self.default_locale)

    def _tagger_for(self, locale: Locale) -> LexicalTagger:
        return self.tagger or RuleBasedTagger(locale)

    def _components(self, corrected: str, locale: Locale) -> list[FinalizedComponent]:
        stripped = strip_expiration_phrases(corrected, locale)
        expanded = expand(stripped, locale)
        tokens = self._tagger_for(locale).tag(expanded)

        components: list[FinalizedComponent] = []
        for raw in accumulate(tokens):
            spoken = validate_name(raw.name)
            if spoken is None:
                continue
            quantity = raw.quantity if raw.quantity is not None else DEFAULT_QUANTITY
            finalized = finalize_unit(raw.unit, quantity, spoken)
            components.append(
                FinalizedComponent(
                    index=len(components),
                    name=canonical_name(spoken) or spoken,
                    spoken_name=spoken,
                    quantity=finalized.quantity,
                    unit=finalized.unit,
                    needs_volume_input=finalized.needs_volume_input,
                )
            )
        return components

    def parse_components(
        self, text: str, locale: Locale | str | None = None
    ) -> list[FinalizedComponent]:
        """
        Run the synchronous text stages: correction through unit finalization.

        Args:
            text: Raw utterance.
            locale: Utterance locale; detected from the text when omitted.

        Returns:
            Validated components with canonical names and units, spoken order.
        """
        resolved = self.resolve_locale(text, locale)
        return self._components(apply_corrections(text or "", resolved), resolved)

    async def parse(
        self,
        text: str,
        locale: Locale | str | None = None,
        now: date | datetime | None = None,
    ) -> list[ParsedFoodItem]:
        """
        Parse an utterance into enriched inventory records.

        Args:
            text: Raw utterance.
            locale: Utterance locale; detected from the text when omitted.
            now: The moment the utterance was made. Defaults to the current time.

        Returns:
            ParsedFoodItem list in spoken order; empty when nothing was understood.
        """
        resolved = self.resolve_locale(text, locale)
        now = now or datetime.now()

        with LoggingContext(utterance_id=str(uuid.uuid4()), locale=resolved.value):
            corrected = apply_corrections(text or "", resolved)
            components = self._components(corrected, resolved)
            if not components:
                logger.info("No food items understood in utterance")
                return []

            hint = ExpirationExtractor(resolved).extract(corrected, now)
            scope_expiration(corrected, components, hint)
            purchase_date = extract_purchase_date(corrected, now)

            items = await self._orchestrator.enrich(components, purchase_date, resolved)
            logger.info(f"Parsed {len(items)} food item(s)")
            return items


async def parse(
    text: str,
    locale: Locale | str | None = None,
    now: date | datetime | None = None,
) -> list[ParsedFoodItem]:
    """Parse an utterance with the default table-backed collaborators."""
    return await FoodItemParser().parse(text, locale=locale, now=now)
