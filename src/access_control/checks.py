"""System checks for the role hierarchy."""

from django.core.checks import Error, register

from access_control.roles import ROLE_LEVELS, Role


@register()
def role_hierarchy_is_total_order(app_configs, **kwargs):
    """Ensure every Role has a level and no two roles share one.

    Ownership and draft checks compare levels numerically, so a missing or
    duplicated level would make those decisions ambiguous.
    """
    errors: list[Error] = []

    for role in Role:
        if role not in ROLE_LEVELS:
            errors.append(
                Error(
                    f"Role {role.value} has no entry in ROLE_LEVELS.",
                    obj=role,
                    id="access_control.E001",
                )
            )

    levels = list(ROLE_LEVELS.values())
    if len(levels) != len(set(levels)):
        errors.append(
            Error(
                "ROLE_LEVELS assigns the same level to more than one role.",
                id="access_control.E002",
            )
        )

    return errors
