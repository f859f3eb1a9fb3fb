"""Fold flat catalog rows into one product group per handle."""

from __future__ import annotations

from catalog_import.api.schemas.catalog_import import (
    Finding,
    NormalizedRow,
    ProductGroup,
    VariantSpec,
)
from catalog_import.services.row_validator import row_number


def _variant_from_row(row: NormalizedRow) -> VariantSpec:
    return VariantSpec(
        title=row.variant_title,
        sku=row.sku,
        price=row.price,
        quantity=row.quantity,
        manage_inventory=row.manage_inventory,
        allow_backorder=row.allow_backorder,
        images=list(row.variant_images),
        options=list(row.options),
    )


def _group_from_row(row: NormalizedRow) -> ProductGroup:
    return ProductGroup(
        handle=row.handle,
        title=row.title,
        subtitle=row.subtitle,
        description=row.description,
        status=row.status,
        thumbnail=row.thumbnail,
        highlights=list(row.highlights),
        discountable=row.discountable,
        collections=list(row.collections),
        categories=list(row.categories),
        tags=list(row.tags),
    )


def group_rows(rows: list[NormalizedRow], findings: list[Finding]) -> list[ProductGroup]:
    """Group rows by handle in order of first appearance.

    The first row seen for a handle supplies the product-level fields; later
    rows only add variants. Findings are attached to the group owning their
    row number.
    """
    findings_by_row: dict[int, list[Finding]] = {}
    for finding in findings:
        findings_by_row.setdefault(finding.row, []).append(finding)

    groups: dict[str, ProductGroup] = {}
    for index, row in enumerate(rows):
        group = groups.get(row.handle)
        if group is None:
            group = groups[row.handle] = _group_from_row(row)
        group.variants.append(_variant_from_row(row))

        for finding in findings_by_row.get(row_number(index), []):
            if finding.is_blocking:
                group.errors.append(finding)
            else:
                group.warnings.append(finding)

    return list(groups.values())
