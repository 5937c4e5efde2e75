from ..exceptions import InvalidTransitionError
from ..models.period import Period


def resolve_period(company, date):
    """
    Entry date determines the period.
    An entry without a matching period is allowed (period stays empty);
    an entry dated inside a closed period is not.
    """
    period = (
        Period.objects.for_company(company)
        .filter(start_date__lte=date, end_date__gte=date)
        .first()
    )
    if period and period.is_closed:
        raise InvalidTransitionError(
            f"Accounting period {period.name} is closed for {date}"
        )
    return period
