"""Report name normalization.

Load-testing tools often append a run-specific numeric or date suffix to
otherwise identical result files (``load-20240101.xml``). Correlating reports
across builds requires collapsing that suffix so ``load-20240101.xml`` and
``load-20240102.xml`` are the same logical report, ``load.xml``.
"""

import re

BUILD_SUFFIX_PATTERN = re.compile(r"-[0-9]*\.xml")
NORMALIZED_SUFFIX = ".xml"


def normalize_report_name(name: str | None) -> str | None:
    """Strip the build suffix from a report file name.

    Every ``-<digits>.xml`` occurrence is replaced by ``.xml``. Names without
    the suffix are returned unchanged. Replacing can expose a new suffix
    (``load-7-1.xml`` becomes ``load-7.xml``), so substitution repeats until
    nothing matches and normalizing twice is always a no-op.

    Example:
        >>> normalize_report_name("load-12345.xml")
        'load.xml'
        >>> normalize_report_name("load.xml")
        'load.xml'
        >>> normalize_report_name("results.csv")
        'results.csv'
    """
    if name is None:
        return None
    result = name
    while BUILD_SUFFIX_PATTERN.search(result):
        result = BUILD_SUFFIX_PATTERN.sub(NORMALIZED_SUFFIX, result)
    return result
