"""British/American spelling variants and tag comparison keys."""

from __future__ import annotations

import re

# UK spelling -> US spelling
SPELLING_VARIANTS: dict[str, str] = {
    "aeroplane": "airplane",
    "aluminium": "aluminum",
    "amortise": "amortize",
    "analyse": "analyze",
    "analysed": "analyzed",
    "analysing": "analyzing",
    "anaemia": "anemia",
    "anaesthesia": "anesthesia",
    "apologise": "apologize",
    "archaeology": "archeology",
    "armour": "armor",
    "behaviour": "behavior",
    "behavioural": "behavioral",
    "behaviours": "behaviors",
    "calibre": "caliber",
    "cancelled": "canceled",
    "cancelling": "canceling",
    "capitalise": "capitalize",
    "capitalisation": "capitalization",
    "catalogue": "catalog",
    "categorise": "categorize",
    "centre": "center",
    "centres": "centers",
    "centralise": "centralize",
    "characterise": "characterize",
    "civilisation": "civilization",
    "colour": "color",
    "colours": "colors",
    "colourful": "colorful",
    "counselling": "counseling",
    "criticise": "criticize",
    "customise": "customize",
    "decentralised": "decentralized",
    "defence": "defense",
    "dialogue": "dialog",
    "digitise": "digitize",
    "digitisation": "digitization",
    "emphasise": "emphasize",
    "encyclopaedia": "encyclopedia",
    "endeavour": "endeavor",
    "enrolment": "enrollment",
    "favour": "favor",
    "favourite": "favorite",
    "favourites": "favorites",
    "fibre": "fiber",
    "flavour": "flavor",
    "foetus": "fetus",
    "fulfil": "fulfill",
    "fulfilment": "fulfillment",
    "globalisation": "globalization",
    "grey": "gray",
    "gynaecology": "gynecology",
    "harbour": "harbor",
    "honour": "honor",
    "humour": "humor",
    "industrialisation": "industrialization",
    "initialise": "initialize",
    "jewellery": "jewelry",
    "judgement": "judgment",
    "kilometre": "kilometer",
    "labour": "labor",
    "labelled": "labeled",
    "labelling": "labeling",
    "leukaemia": "leukemia",
    "licence": "license",
    "litre": "liter",
    "localisation": "localization",
    "manoeuvre": "maneuver",
    "marvellous": "marvelous",
    "maximise": "maximize",
    "meagre": "meager",
    "minimise": "minimize",
    "mobilisation": "mobilization",
    "modelling": "modeling",
    "modernisation": "modernization",
    "mould": "mold",
    "moustache": "mustache",
    "neighbour": "neighbor",
    "neighbourhood": "neighborhood",
    "normalise": "normalize",
    "normalisation": "normalization",
    "oestrogen": "estrogen",
    "offence": "offense",
    "optimise": "optimize",
    "optimisation": "optimization",
    "organisation": "organization",
    "organisational": "organizational",
    "organisations": "organizations",
    "organise": "organize",
    "organised": "organized",
    "paediatric": "pediatric",
    "paediatrics": "pediatrics",
    "palaeontology": "paleontology",
    "parlour": "parlor",
    "personalisation": "personalization",
    "plough": "plow",
    "pretence": "pretense",
    "prioritise": "prioritize",
    "prioritisation": "prioritization",
    "pyjamas": "pajamas",
    "randomised": "randomized",
    "realise": "realize",
    "recognise": "recognize",
    "rumour": "rumor",
    "sabre": "saber",
    "saviour": "savior",
    "sceptic": "skeptic",
    "sceptical": "skeptical",
    "sceptre": "scepter",
    "socialisation": "socialization",
    "specialise": "specialize",
    "specialisation": "specialization",
    "splendour": "splendor",
    "standardise": "standardize",
    "standardisation": "standardization",
    "summarise": "summarize",
    "summarisation": "summarization",
    "synchronise": "synchronize",
    "synchronisation": "synchronization",
    "theatre": "theater",
    "travelled": "traveled",
    "traveller": "traveler",
    "travelling": "traveling",
    "tumour": "tumor",
    "utilise": "utilize",
    "utilisation": "utilization",
    "valour": "valor",
    "vapour": "vapor",
    "visualise": "visualize",
    "visualisation": "visualization",
    "woollen": "woolen",
    "yoghurt": "yogurt",
}

_UK_BY_US: dict[str, str] = {us: uk for uk, us in SPELLING_VARIANTS.items()}

_WORD_SPLIT = re.compile(r"([\s_-]+)")
_NON_KEY_CHARS = re.compile(r"[^\w\s-]|_")
_KEY_SEPARATORS = re.compile(r"[\s-]+")


def _match_case(original: str, replacement: str) -> str:
    if original.isupper() and len(original) > 1:
        return replacement.upper()
    if original[:1].isupper():
        return replacement[:1].upper() + replacement[1:]
    return replacement


def _preferred_word(word: str, language_preference: str) -> str:
    lowered = word.lower()
    if lowered in SPELLING_VARIANTS:
        uk, us = lowered, SPELLING_VARIANTS[lowered]
    elif lowered in _UK_BY_US:
        uk, us = _UK_BY_US[lowered], lowered
    else:
        return word

    preferred = us if language_preference == "us" else uk
    return _match_case(word, preferred)


def preferred_spelling(tag: str, language_preference: str = "uk") -> str:
    """Return ``tag`` with each known variant word in the preferred spelling.

    Words are the hyphen, underscore, or whitespace separated parts of the tag;
    separators and unknown words are kept as they are. Any preference other
    than ``"us"`` selects UK spelling.

    Examples:
        >>> preferred_spelling("Color-Theory", "uk")
        'Colour-Theory'
        >>> preferred_spelling("behaviour", "us")
        'behavior'
    """
    parts = _WORD_SPLIT.split(tag)
    return "".join(
        part if index % 2 else _preferred_word(part, language_preference)
        for index, part in enumerate(parts)
    )


def comparison_key(tag: str) -> str:
    """Key used to decide whether two tags are the same. Never displayed."""
    stripped = _NON_KEY_CHARS.sub("", tag.lower())
    return _KEY_SEPARATORS.sub("-", stripped).strip("-")
