"""
Tabular exports of breakdowns, harmonization results and quote history.
"""
import pandas as pd

from ..engine.models import QuoteBreakdown, HarmonizationResult
from ..services.quote_history import QuoteRecord


LINE_ITEM_COLUMNS = ['Category', 'Code', 'Monthly Cost']


def _line_item_frame(items: list[tuple[str, str, int]], subtotal_cents: int, final_cents: int) -> pd.DataFrame:
    rows = [{'Category': name, 'Code': code, 'Monthly Cost': cents / 100} for name, code, cents in items]
    rows.append({'Category': 'Subtotal', 'Code': 'subtotal', 'Monthly Cost': subtotal_cents / 100})
    rows.append({'Category': 'Total', 'Code': 'total', 'Monthly Cost': final_cents / 100})
    return pd.DataFrame(rows, columns=LINE_ITEM_COLUMNS)


def breakdown_frame(breakdown: QuoteBreakdown) -> pd.DataFrame:
    """Line items plus subtotal and total rows, amounts in dollars."""
    return _line_item_frame(
        [(item.name, item.code, item.cost_cents) for item in breakdown.line_items],
        breakdown.subtotal_cents,
        breakdown.final_monthly_cost_cents,
    )


def saved_breakdown_frame(calculation: dict) -> pd.DataFrame:
    """
    Same table as breakdown_frame, read from a saved quote's calculation
    document. The figures are the ones the client was quoted; nothing is
    recomputed.
    """
    return _line_item_frame(
        [(item['name'], item['code'], item['costCents']) for item in calculation.get('lineItems', [])],
        calculation['subtotalCents'],
        calculation['finalMonthlyCostCents'],
    )


def comparison_frame(result: HarmonizationResult) -> pd.DataFrame:
    """Per-category discount table."""
    df = pd.DataFrame([
        {
            'Category': c.category,
            'Source': c.source_cents / 100,
            'Target': c.target_cents / 100,
            'Discount %': c.discount_percent,
            'Threshold %': c.threshold_percent,
            'Flagged': c.exceeds_threshold,
        }
        for c in result.categories
    ], columns=['Category', 'Source', 'Target', 'Discount %', 'Threshold %', 'Flagged'])
    df['Difference'] = df['Source'] - df['Target']
    return df


def quotes_frame(records: list[QuoteRecord]) -> pd.DataFrame:
    """Saved quotes, one row each."""
    return pd.DataFrame([
        {
            'Quote ID': r.id,
            'Client': r.client_name or 'Prospect',
            'Created': r.created_at,
            'Rate Card': r.schedule_id,
            'Version': r.schedule_version,
            'Monthly Orders': r.profile.get('monthlyOrders'),
            'Monthly Total': r.final_monthly_cost_cents / 100,
        }
        for r in records
    ], columns=['Quote ID', 'Client', 'Created', 'Rate Card', 'Version', 'Monthly Orders', 'Monthly Total'])


def to_csv(df: pd.DataFrame) -> str:
    return df.to_csv(index=False)
