import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))


ALLOCATION_TEXT = """Investment Allocation Report
Smith Family Superannuation Fund
As at 30 June 2024

Asset Class Summary
Asset Class Market Value % of Portfolio
Australian Equities $450,000.00 45.00%
International Equities $300,000.00 30.00%
Fixed Interest $150,000.00 15.00%
Cash $100,000.00 10.00%
Total Portfolio $1,000,000.00 100.00%

Investment Holdings
Australian Equities
BHP Group Ltd 5,000 45.00 $225,000.00 22.50%
CSL Ltd 750 300.00 $225,000.00 22.50%
International Equities
Vanguard International Shares ETF 3,000 100.00 $300,000.00 30.00%
Fixed Interest
Australian Government Bond Fund $150,000.00 15.00%
Cash
Cash Management Account $100,000.00 10.00%
"""

PERFORMANCE_TEXT = """Investment Movement and Returns Report
Smith Family Superannuation Fund
For the period 1 July 2023 to 30 June 2024

Investment Movement
Opening Market Value $900,000.00
Contributions $25,000.00
Withdrawals ($5,000.00)
Income $32,000.00
Expenses ($4,000.00)
Dollar Return After Expenses $80,000.00
Closing Market Value $1,000,000.00

Time Weighted Return
1 Month 1.20%
3 Months 3.40%
6 Months 5.10%
1 Year 8.75%
Since Inception 7.10%
"""


@pytest.fixture()
def allocation_text() -> str:
    return ALLOCATION_TEXT


@pytest.fixture()
def performance_text() -> str:
    return PERFORMANCE_TEXT
