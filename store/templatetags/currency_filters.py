from django import template

register = template.Library()


def _group_indian(digits):
    # 1234567 -> 12,34,567
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


@register.filter
def inr(value):
    try:
        amount = int(value)
    except (TypeError, ValueError):
        return "₹0"
    sign = "-" if amount < 0 else ""
    return f"{sign}₹{_group_indian(str(abs(amount)))}"
