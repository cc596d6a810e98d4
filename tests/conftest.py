"""Shared fixtures for sales analytics tests."""

from datetime import date

import pytest


@pytest.fixture
def today() -> date:
    """Fixed reference date so period windows are deterministic."""
    return date(2024, 6, 15)


@pytest.fixture
def sample_transactions() -> list[dict]:
    """Mixed-spelling transaction records across products, sellers and months.

    Totals: 100 + 200 + 50 + 300 + 0 + 75 + 25 = 750
    """
    return [
        {
            "paymentValue": 100,
            "paymentDate": "1/1/2024",
            "memberId": "A",
            "cleanedProduct": "Yoga Mat",
            "cleanedCategory": "Retail",
            "soldBy": "Priya",
            "paymentMethod": "Card",
        },
        {
            "paymentValue": 200,
            "paymentDate": "15/1/2024",
            "memberId": "B",
            "cleanedProduct": "Class Pack",
            "cleanedCategory": "Classes",
            "soldBy": "Priya",
            "paymentMethod": "UPI",
        },
        {
            "Payment Value": "50",
            "Payment Date": "2024/2/3",
            "Member ID": "A",
            "Cleaned Product": "Yoga Mat",
            "Cleaned Category": "Retail",
            "Sold By": "Arjun",
            "Payment Method": "Card",
        },
        {
            "payment_value": 300.0,
            "payment_date": "10/5/2024",
            "member_id": "C",
            "product": "Class Pack",
            "category": "Classes",
            "sold_by": "Arjun",
            "payment_method": "Cash",
        },
        {
            "paymentValue": 0,
            "paymentDate": "20/6/2024",
            "memberId": "D",
            "cleanedProduct": "Free Trial",
            "cleanedCategory": "Classes",
            "soldBy": "",
            "paymentMethod": "Card",
        },
        {
            "paymentValue": 75,
            "paymentDate": "not-a-date",
            "memberId": "E",
            "cleanedProduct": "Water Bottle",
            "cleanedCategory": "Retail",
            "soldBy": "Priya",
        },
        {
            "paymentValue": 25,
            "paymentDate": "5/6/2024",
            "memberId": "A",
            "paymentItem": "Water Bottle",
            "paymentCategory": "Retail",
            "soldBy": "Arjun",
            "paymentMethod": "UPI",
        },
    ]


@pytest.fixture
def jan_feb_transactions() -> list[dict]:
    """Three transactions across January and February 2024."""
    return [
        {"paymentValue": 100, "paymentDate": "1/1/2024", "memberId": "A"},
        {"paymentValue": 200, "paymentDate": "1/1/2024", "memberId": "B"},
        {"paymentValue": 50, "paymentDate": "1/2/2024", "memberId": "A"},
    ]
