import pytest
from affordability.params import BorrowerProfile, LoanParameters, LoanType, RateQuote, ScenarioParams, GoalParams


@pytest.fixture
def borrower():
    return BorrowerProfile(fico_score=700, annual_income=90_000, monthly_debts=400)


@pytest.fixture
def loan():
    return LoanParameters(
        loan_type=LoanType.CONVENTIONAL,
        ltv=80,
        term_years=30,
        property_tax_rate=1.1,
        annual_insurance=1_200,
    )


@pytest.fixture
def rates():
    return RateQuote(conventional=6.5, fha=6.25)


@pytest.fixture
def params(borrower, loan, rates):
    return ScenarioParams(
        state="TX",
        borrower=borrower,
        loan=loan,
        rates=rates,
        goals=GoalParams(current_down_payment=20_000, monthly_expenses={"living": 3_000}),
    )
