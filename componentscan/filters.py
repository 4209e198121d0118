"""Decides which component references make it into the report."""

from __future__ import annotations

import logging
import re
from collections.abc import Collection

from componentscan.imports import ImportMap

logger = logging.getLogger(__name__)


class InclusionFilter:
    """Allow-list, subcomponent and import-source checks, in that order.

    Args:
        components: Allowed names. A reference passes if its resolved
            leading segment or its full resolved dotted name is listed.
            None allows everything.
        include_sub_components: Whether dotted references (``Foo.Bar``)
            are recorded at all.
        imported_from: Module name (exact match) or compiled pattern
            (``re.search``) the leading segment must be imported from.
    """

    def __init__(
        self,
        components: Collection[str] | None = None,
        include_sub_components: bool = False,
        imported_from: str | re.Pattern[str] | None = None,
    ) -> None:
        self.components = components
        self.include_sub_components = include_sub_components
        self.imported_from = imported_from

    def allows(
        self,
        written: list[str],
        resolved: list[str],
        resolved_first: str,
        imports: ImportMap,
    ) -> bool:
        """Check one reference.

        Args:
            written: Name segments as written in the source.
            resolved: Canonical segments after alias resolution.
            resolved_first: Alias-resolved leading segment.
            imports: Import map of the current file.
        """
        if self.components is not None:
            if (
                resolved_first not in self.components
                and ".".join(resolved) not in self.components
            ):
                logger.debug("Skipping %s: not in components", ".".join(resolved))
                return False

        if not self.include_sub_components and len(written) > 1:
            logger.debug("Skipping %s: subcomponent", ".".join(resolved))
            return False

        if self.imported_from:
            record = imports.get(written[0])
            if record is None:
                logger.debug("Skipping %s: not imported", ".".join(resolved))
                return False

            if isinstance(self.imported_from, re.Pattern):
                matched = self.imported_from.search(record.module_name) is not None
            else:
                matched = record.module_name == self.imported_from
            if not matched:
                logger.debug(
                    "Skipping %s: imported from %s", ".".join(resolved), record.module_name
                )
                return False

        return True
