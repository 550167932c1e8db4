"""Post-translational modification vocabulary.

Maps free text ("phosphorylated", "de-ubiquitination", ...) to a modification
label. Removal forms are checked first as prefixes, so "dephosphorylation" is
never read as "Phosphorylation".
"""

import re

UNKNOWN = "UNKNOWN"

_REMOVAL_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"de-?acetylat", re.IGNORECASE), "Deacetylation"),
    (re.compile(r"de-?farnesylat", re.IGNORECASE), "Defarnesylation"),
    (re.compile(r"de-?glycosylat", re.IGNORECASE), "Deglycosylation"),
    (re.compile(r"de-?hydroly", re.IGNORECASE), "Dehydrolysis"),
    (re.compile(r"de-?hydroxylat", re.IGNORECASE), "Dehydroxylation"),
    (re.compile(r"de-?methylat", re.IGNORECASE), "Demethylation"),
    (re.compile(r"de-?phosphorylat", re.IGNORECASE), "Dephosphorylation"),
    (re.compile(r"de-?ribosylat", re.IGNORECASE), "Deribosylation"),
    (re.compile(r"de-?sumoylat", re.IGNORECASE), "Desumoylation"),
    (re.compile(r"de-?ubiquitinat", re.IGNORECASE), "Deubiquitination"),
)

_ADDITIVE_STEMS: tuple[tuple[str, str], ...] = (
    ("acetylat", "Acetylation"),
    ("farnesylat", "Farnesylation"),
    ("glycosylat", "Glycosylation"),
    ("hydroly", "Hydrolysis"),
    ("hydroxylat", "Hydroxylation"),
    ("methylat", "Methylation"),
    ("phosphorylat", "Phosphorylation"),
    ("ribosylat", "Ribosylation"),
    ("sumoylat", "Sumoylation"),
    ("ubiquitinat", "Ubiquitination"),
)


def get_modification_label(text: str) -> str:
    """Return the modification label named by `text`, or UNKNOWN.

    Examples:
        >>> get_modification_label("phosphorylated")
        'Phosphorylation'
        >>> get_modification_label("De-phosphorylation")
        'Dephosphorylation'
        >>> get_modification_label("binding")
        'UNKNOWN'
    """
    lowered = text.lower()
    for pattern, label in _REMOVAL_PATTERNS:
        if pattern.match(lowered):
            return label
    for stem, label in _ADDITIVE_STEMS:
        if stem in lowered:
            return label
    return UNKNOWN
