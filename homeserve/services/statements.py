# homeserve/services/statements.py
import csv
import logging
from datetime import datetime
from io import BytesIO, StringIO

from jinja2 import Template
from xhtml2pdf import pisa

from ..exceptions import Internal
from ..models.provider import Provider
from .earnings import build_summary

logger = logging.getLogger(__name__)

STATEMENT_TEMPLATE = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>Earnings Statement</title>
    <style>
        body { font-family: Arial, sans-serif; margin: 20px; }
        h1 { color: #2f855a; }
        .summary-card {
            background: #f8f9fa;
            padding: 15px;
            margin-bottom: 10px;
        }
        table { width: 100%; border-collapse: collapse; margin-top: 20px; }
        th, td { padding: 8px; text-align: left; border-bottom: 1px solid #ddd; }
        th { background-color: #f8f9fa; }
        .completed { color: #22543d; }
        .pending { color: #7b341e; }
        .failed { color: #742a2a; }
    </style>
</head>
<body>
    <h1>Earnings Statement</h1>
    <p><strong>Generated:</strong> {{ generated_date }}</p>
    <p><strong>Provider:</strong> {{ provider_id }}</p>

    <div class="summary-card">
        <p><strong>Total Earnings:</strong> {{ total_earnings }}</p>
        <p><strong>Platform Fees:</strong> {{ platform_fees }}</p>
        <p><strong>Net Earnings:</strong> {{ net_earnings }}</p>
        <p><strong>This Month:</strong> {{ this_month_earnings }}</p>
        <p><strong>Completed Bookings:</strong> {{ completed_bookings }}</p>
    </div>

    <h2>Transaction History</h2>
    <table>
        <thead>
            <tr>
                <th>Date</th>
                <th>Transaction</th>
                <th>Amount</th>
                <th>Status</th>
                <th>Method</th>
            </tr>
        </thead>
        <tbody>
            {% for entry in transactions %}
            <tr>
                <td>{{ entry.date }}</td>
                <td>{{ entry.transaction_id }}</td>
                <td>{{ entry.amount }}</td>
                <td class="{{ entry.status }}">{{ entry.status }}</td>
                <td>{{ entry.payment_method }}</td>
            </tr>
            {% endfor %}
        </tbody>
    </table>
</body>
</html>
"""


def format_amount(amount: float) -> str:
    return f"{amount:,.2f}"


def render_csv(provider: Provider, now: datetime) -> str:
    summary = build_summary(provider, now)
    output = StringIO()
    writer = csv.writer(output)

    writer.writerow(["Earnings Statement", f"Generated: {now.strftime('%Y-%m-%d %H:%M:%S')}"])
    writer.writerow([])

    writer.writerow(["Summary"])
    writer.writerow(["Total Earnings:", format_amount(summary.total_earnings)])
    writer.writerow(["Platform Fees:", format_amount(summary.platform_fees)])
    writer.writerow(["Net Earnings:", format_amount(summary.net_earnings)])
    writer.writerow(["This Month:", format_amount(summary.this_month_earnings)])
    writer.writerow(["Completed Bookings:", summary.completed_bookings])
    writer.writerow([])

    writer.writerow(["Transaction History"])
    writer.writerow(["Date", "Transaction ID", "Amount", "Status", "Payment Method"])
    for entry in provider.withdrawal_history:
        writer.writerow([
            entry.date.strftime("%Y-%m-%d"),
            entry.transaction_id,
            format_amount(entry.amount),
            entry.status.value,
            entry.payment_method.value if entry.payment_method else ""
        ])

    return output.getvalue()


def render_pdf(provider: Provider, now: datetime) -> bytes:
    summary = build_summary(provider, now)
    context = {
        "generated_date": now.strftime("%Y-%m-%d %H:%M:%S"),
        "provider_id": provider.provider_id,
        "total_earnings": format_amount(summary.total_earnings),
        "platform_fees": format_amount(summary.platform_fees),
        "net_earnings": format_amount(summary.net_earnings),
        "this_month_earnings": format_amount(summary.this_month_earnings),
        "completed_bookings": summary.completed_bookings,
        "transactions": [
            {
                "date": entry.date.strftime("%Y-%m-%d"),
                "transaction_id": entry.transaction_id,
                "amount": format_amount(entry.amount),
                "status": entry.status.value,
                "payment_method": entry.payment_method.value if entry.payment_method else "",
            }
            for entry in provider.withdrawal_history
        ],
    }

    html = Template(STATEMENT_TEMPLATE).render(context)
    pdf = BytesIO()
    pisa_status = pisa.CreatePDF(html, dest=pdf)
    if pisa_status.err:
        logger.error(f"Statement PDF generation failed for provider {provider.provider_id}: {pisa_status.err}")
        raise Internal("Failed to generate earnings statement")
    return pdf.getvalue()
