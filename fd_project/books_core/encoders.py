from decimal import Decimal

from django.core.serializers.json import DjangoJSONEncoder


class AmountJSONEncoder(DjangoJSONEncoder):
    """Money goes out as JSON numbers, the same as journal entry rows."""

    def default(self, o):
        if isinstance(o, Decimal):
            return float(o)
        return super().default(o)
