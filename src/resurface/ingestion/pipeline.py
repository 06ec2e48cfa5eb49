"""Capture pipeline: extract, classify, build, store."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterable

from resurface.capture.features import FeatureExtractor
from resurface.capture.models import CaptureEvent
from resurface.classification.engine import Classifier
from resurface.classification.models import ItemCategory
from resurface.state import ItemFactory, ItemStore, StateError

from .models import CaptureBatch

LOGGER = logging.getLogger(__name__)


class CapturePipeline:
    """Coordinate extraction, classification, and storage of captures."""

    def __init__(
        self,
        extractor: FeatureExtractor,
        classifier: Classifier,
        factory: ItemFactory,
        store: ItemStore,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.extractor = extractor
        self.classifier = classifier
        self.factory = factory
        self.store = store
        self.clock = clock

    def run(self, events: Iterable[CaptureEvent]) -> CaptureBatch:
        """Process captures and return aggregated results.

        Store failures are logged and recorded on the batch; the remaining
        captures are still processed. A capture whose id is already stored is
        reported as a duplicate and leaves the existing item untouched.
        """
        batch = CaptureBatch()
        for event in events:
            features = self.extractor.extract(event)
            result = self.classifier.classify(features)
            # Keep exactly the text the flags were computed over.
            trimmed = event.model_copy(update={"raw_text": features.text_snippet or None})
            item = self.factory.from_capture(trimmed, result, self.clock())

            try:
                saved = self.store.save(item)
            except (StateError, OSError) as exc:
                LOGGER.warning("Could not store capture %s: %s", event.id, exc)
                batch.errors.append(f"{event.id}: {exc}")
                continue

            if not saved:
                batch.duplicates.append(event.id)
                continue

            if result.category is ItemCategory.NONE:
                batch.uncategorized.append(event.id)
            LOGGER.info(
                "Stored capture %s as %s/%s (%.2f).",
                event.id,
                result.category.value,
                result.stack.value,
                result.confidence,
            )
            batch.stored.append(item)
        return batch
