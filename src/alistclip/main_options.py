"""Click option helper for choosing exactly one mode flag."""
import click


def _conflicting(name: str, conflicts_with: list[str], opts: dict) -> str | None:
    """Return the first conflicting option present in opts, if any.

    Args:
        name: Name of the current option.
        conflicts_with: Option names that may not be combined with it.
        opts: Dictionary of parsed options.
    """
    for other in conflicts_with:
        if other != name and opts.get(other):
            return other
    return None


class ModeOption(click.Option):
    """Flag option that may not be combined with the other mode flags."""

    def __init__(self, *args, **kwargs):
        """Initialize with conflicts_with listing the other mode flags."""
        self.conflicts_with = kwargs.pop("conflicts_with", [])
        super().__init__(*args, **kwargs)

    def handle_parse_result(self, ctx, opts, args):
        """Reject the option when a conflicting mode flag is also set."""
        if opts.get(self.name):
            other = _conflicting(self.name, self.conflicts_with, opts)
            if other is not None:
                raise click.UsageError(
                    f"Options --{self.name} and --{other} are mutually exclusive",
                    ctx=ctx,
                )
        return super().handle_parse_result(ctx, opts, args)
