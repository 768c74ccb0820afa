"""
Validation rules for user-entered and imported kitchen data.

Every check returns a ValidationResult: errors make the value
unusable, warnings are advisory only. Nothing here raises on bad
input. Failures are also reported through an optional CategoryLogger.

Messages are user-facing French strings and are stable: the same
input always yields the same errors and warnings.
"""

from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import Any, Mapping, Optional

import regex
from pydantic import BaseModel, Field

from .telemetry import CategoryLogger, LogCategory

VALID_UNITS = (
    "g", "kg", "ml", "cl", "L", "càs", "càc",
    "pièce", "tranche", "pot", "gousse", "pincée",
)

# EAN-8, UPC-A, EAN-13, GTIN-14
STANDARD_BARCODE_LENGTHS = (8, 12, 13, 14)

FORBIDDEN_CHARS = "<>\"'&{}"

MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 100
MAX_QUANTITY = 10000
MAX_DECIMALS = 3
MAX_PORTIONS = 20

_FORBIDDEN_RE = re.compile("[" + re.escape(FORBIDDEN_CHARS) + "]")
_DIGITS_RE = re.compile(r"^\d+$", re.ASCII)
_NUMBER_PREFIX_RE = re.compile(
    r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)",
    re.ASCII,
)

# One displayed character: a base plus its marks, a flag pair, an emoji
# with its skin-tone modifier or a joined emoji sequence.
GRAPHEME_RE = regex.compile(r"\X")


class ValidationResult(BaseModel):
    """Outcome of checking one candidate value.

    Attributes:
        is_valid: True if and only if ``errors`` is empty.
        errors: Violations, in the order they were detected.
        warnings: Advisory messages, or None when there are none.
    """

    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: Optional[list[str]] = None

    @classmethod
    def build(
        cls, errors: list[str], warnings: Optional[list[str]] = None
    ) -> "ValidationResult":
        return cls(
            is_valid=not errors,
            errors=list(errors),
            warnings=list(warnings) if warnings else None,
        )


def parse_number(value: Any) -> float:
    """Parse a number or numeric string, returning NaN when impossible.

    Strings are read like a lenient float parser: leading whitespace is
    skipped and the longest numeric prefix wins, so ``"10kg"`` is 10
    while ``"kg10"`` is NaN.
    """
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        match = _NUMBER_PREFIX_RE.match(value.lstrip())
        if match:
            return float(match.group(0).replace("Infinity", "inf"))
    return math.nan


def _fraction_digits(qty: float) -> int:
    """Count the digits after the decimal point of ``qty`` written out in base 10."""
    if not math.isfinite(qty) or qty == int(qty):
        return 0
    text = format(Decimal(repr(qty)), "f")
    return len(text.partition(".")[2])


def display_length(text: str) -> int:
    """Number of displayed characters (grapheme clusters) in ``text``."""
    return len(GRAPHEME_RE.findall(text))


def _clean(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def validate_quantity(
    value: Any, context: str = "", log: Optional[CategoryLogger] = None
) -> ValidationResult:
    """Check a quantity given as a number or numeric string.

    Args:
        value: Candidate quantity.
        context: Where the value comes from, used in telemetry only.
        log: Telemetry sink for failures.

    Returns:
        ValidationResult with negativity as the only hard error besides
        unparseable input.
    """
    errors: list[str] = []
    warnings: list[str] = []

    qty = parse_number(value)
    if math.isnan(qty):
        errors.append(f'Quantité invalide: "{value}" n\'est pas un nombre')
        _report(log, LogCategory.GENERAL, "quantité", context, value, errors)
        return ValidationResult.build(errors)

    if qty < 0:
        errors.append("La quantité ne peut pas être négative")

    if qty == 0:
        warnings.append("Quantité de 0 détectée")

    if qty > MAX_QUANTITY:
        warnings.append(f"Quantité très élevée détectée (>{MAX_QUANTITY})")

    if _fraction_digits(qty) > MAX_DECIMALS:
        warnings.append(f"Précision excessive détectée (>{MAX_DECIMALS} décimales)")

    if errors:
        _report(log, LogCategory.GENERAL, "quantité", context, value, errors)

    return ValidationResult.build(errors, warnings)


def validate_name(
    value: Any, context: str = "", log: Optional[CategoryLogger] = None
) -> ValidationResult:
    """Check an ingredient or recipe name.

    Length and forbidden-character checks are independent, so a single
    name can collect several errors.
    """
    errors: list[str] = []
    warnings: list[str] = []

    name = _clean(value)
    if not name:
        errors.append("Le nom ne peut pas être vide")
        _report(log, LogCategory.USER, "nom", context, value, errors)
        return ValidationResult.build(errors)

    length = display_length(name)
    if length < MIN_NAME_LENGTH:
        errors.append(f"Le nom doit contenir au moins {MIN_NAME_LENGTH} caractères")

    if length > MAX_NAME_LENGTH:
        errors.append(f"Le nom est trop long (maximum {MAX_NAME_LENGTH} caractères)")

    if _FORBIDDEN_RE.search(name):
        errors.append("Le nom contient des caractères interdits")

    if _DIGITS_RE.match(name):
        warnings.append("Le nom ne devrait pas être uniquement numérique")

    if errors:
        _report(log, LogCategory.USER, "nom", context, value, errors)

    return ValidationResult.build(errors, warnings)


def validate_unit(value: Any, log: Optional[CategoryLogger] = None) -> ValidationResult:
    """Check a unit against the closed, case-sensitive list of VALID_UNITS."""
    errors: list[str] = []

    unit = _clean(value)
    if not unit:
        errors.append("L'unité ne peut pas être vide")
    elif unit not in VALID_UNITS:
        errors.append(
            f'Unité non reconnue: "{value}". '
            f"Unités valides: {', '.join(VALID_UNITS)}"
        )

    if errors:
        _report(log, LogCategory.UNITS, "unité", "", value, errors)

    return ValidationResult.build(errors)


def validate_barcode(value: Any, log: Optional[CategoryLogger] = None) -> ValidationResult:
    """Check a product barcode.

    Non-digit content is an error; a length outside the common EAN/UPC
    sizes is only a warning.
    """
    errors: list[str] = []
    warnings: list[str] = []

    barcode = _clean(value)
    if not barcode:
        errors.append("Le code-barres ne peut pas être vide")
        _report(log, LogCategory.BARCODE, "code-barres", "", value, errors, error=True)
        return ValidationResult.build(errors)

    if not _DIGITS_RE.match(barcode):
        errors.append("Le code-barres doit contenir uniquement des chiffres")

    if len(barcode) not in STANDARD_BARCODE_LENGTHS:
        warnings.append(
            f"Longueur inhabituelle pour un code-barres: {len(barcode)} caractères"
        )

    if errors:
        _report(log, LogCategory.BARCODE, "code-barres", "", value, errors, error=True)

    return ValidationResult.build(errors, warnings)


def validate_portions(value: Any) -> ValidationResult:
    """Check a recipe's number of portions."""
    errors: list[str] = []
    warnings: list[str] = []

    portions = parse_number(value)
    if math.isnan(portions):
        errors.append("Nombre de portions invalide")
        return ValidationResult.build(errors)

    if portions <= 0:
        errors.append("Le nombre de portions doit être positif")

    if portions > MAX_PORTIONS:
        warnings.append(f"Nombre de portions très élevé (>{MAX_PORTIONS})")

    if math.isfinite(portions) and portions != math.floor(portions):
        warnings.append("Portions avec décimales détectées")

    return ValidationResult.build(errors, warnings)


def validate_ingredient(
    record: Mapping[str, Any], log: Optional[CategoryLogger] = None
) -> ValidationResult:
    """Validate the fields present on an ingredient record.

    Accepts the stored French keys (``nom``, ``quantite``, ``unite``) or
    their English aliases. Missing fields are skipped. Results are
    concatenated in name, quantity, unit order.
    """
    name = _field(record, "nom", "name")
    quantity = _field(record, "quantite", "quantity")
    unit = _field(record, "unite", "unit")

    results: list[ValidationResult] = []
    if name:
        results.append(validate_name(name, "ingrédient", log=log))
    if quantity is not None:
        results.append(validate_quantity(quantity, "ingrédient", log=log))
    if unit:
        results.append(validate_unit(unit, log=log))

    errors = [e for r in results for e in r.errors]
    warnings = [w for r in results for w in (r.warnings or [])]
    return ValidationResult.build(errors, warnings)


def validate_product(
    payload: Optional[Mapping[str, Any]], log: Optional[CategoryLogger] = None
) -> ValidationResult:
    """Check a product lookup payload (OpenFoodFacts response shape).

    Only the outer structure is required; missing name, categories or
    nutrition data are warnings.
    """
    if not payload:
        return ValidationResult.build(["Produit null ou undefined"])

    product = payload.get("product")
    if not product:
        return ValidationResult.build(
            ["Structure de produit invalide (propriété product manquante)"]
        )

    warnings: list[str] = []
    if not product.get("product_name") and not product.get("product_name_fr"):
        warnings.append("Nom du produit manquant")
    if not product.get("categories") and not product.get("categories_tags"):
        warnings.append("Catégories du produit manquantes")
    if not product.get("nutriments") and not product.get("nutrition_data_per"):
        warnings.append("Informations nutritionnelles manquantes")

    if warnings and log is not None:
        log.debug(LogCategory.API, "Données produit incomplètes", warnings=warnings)

    return ValidationResult.build([], warnings)


def is_valid_quantity(value: Any) -> bool:
    return validate_quantity(value).is_valid


def is_valid_name(value: Any) -> bool:
    return validate_name(value).is_valid


def is_valid_unit(value: Any) -> bool:
    return validate_unit(value).is_valid


def is_valid_barcode(value: Any) -> bool:
    return validate_barcode(value).is_valid


def _field(record: Mapping[str, Any], key: str, alias: str) -> Any:
    if key in record:
        return record[key]
    return record.get(alias)


def _report(
    log: Optional[CategoryLogger],
    category: LogCategory,
    subject: str,
    context: str,
    value: Any,
    errors: list[str],
    error: bool = False,
) -> None:
    """Send a validation failure to the telemetry sink, if one was given."""
    if log is None:
        return
    message = f"Validation {subject} échouée"
    if context:
        message = f"{message} pour {context}"
    if error:
        log.error(category, message, value=value, errors=errors)
    else:
        log.warn(category, message, value=value, errors=errors)
