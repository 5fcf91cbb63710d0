import pandas as pd
from typing import Sequence

from claimsim.models.schemas import Claim, ClaimStats, StatusAmount, StatusCount


def summarize_claims(claims: Sequence[Claim]) -> ClaimStats:
    """Totals, per-status counts and per-status amounts, in first-seen status order."""
    if not claims:
        return ClaimStats(total_amount=0.0, total_claims=0, status_counts=[], amount_by_status=[])

    df = pd.DataFrame(
        [{"status": c.status, "amount": float(c.amount)} for c in claims]
    )
    grouped = df.groupby("status", sort=False)["amount"].agg(["count", "sum"])

    return ClaimStats(
        total_amount=float(df["amount"].sum()),
        total_claims=int(len(df)),
        status_counts=[
            StatusCount(status=str(status), count=int(row["count"]))
            for status, row in grouped.iterrows()
        ],
        amount_by_status=[
            StatusAmount(status=str(status), amount=float(row["sum"]))
            for status, row in grouped.iterrows()
        ],
    )
