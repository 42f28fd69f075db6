"""Раскрытие входных путей и glob-масок в упорядоченный список файлов."""
from __future__ import annotations

import glob
import logging
from pathlib import Path
from typing import Iterable, List

logger = logging.getLogger(__name__)

_GLOB_CHARS = ("*", "?", "[")


class InputService:
    def expand(self, patterns: Iterable[str | Path]) -> List[Path]:
        """Раскрывает пути и маски в порядке их перечисления.

        Совпадения одной маски сортируются; `**` раскрывается рекурсивно.
        Обычные пути передаются как есть, даже если файла нет: отсутствие
        файла выявит загрузка изображения. Повторы отбрасываются, остаётся
        первое вхождение.
        """
        seen = set()
        result: List[Path] = []
        for pattern in patterns:
            pattern = str(pattern)
            # существующий файл берётся буквально, даже если в имени есть [ ] * ?
            if Path(pattern).is_file() or not any(ch in pattern for ch in _GLOB_CHARS):
                matches = [pattern]
            else:
                matches = sorted(glob.glob(pattern, recursive=True))
                matches = [m for m in matches if Path(m).is_file()]
                if not matches:
                    logger.warning(f"Маска не дала ни одного файла: {pattern}")
                logger.debug(f"{pattern}: {len(matches)} файл(ов)")

            for match in matches:
                path = Path(match)
                key = path.resolve()
                if key in seen:
                    continue
                seen.add(key)
                result.append(path)
        return result
