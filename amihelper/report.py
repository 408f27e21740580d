"""Rendering of selected candidates for the terminal and for scripts."""

from typing import Iterable, Sequence

from .candidates import Architecture, Candidate


class DetailsReporter:
    """Three column table: OS, Name, AMI. Columns grow to fit their content."""

    def __init__(self):
        self.os_width = 12
        self.name_width = 30
        self.ami_width = 21

    def update_column_widths(self, details: Iterable[Candidate]):
        for detail in details:
            self.os_width = max(self.os_width, len(detail.family.label))
            self.name_width = max(self.name_width, len(detail.name))
            self.ami_width = max(self.ami_width, len(detail.ami))

    def _line(self, os_text: str, name: str, ami: str, fill: str, align: str) -> str:
        return (
            f"{os_text:{fill}{align}{self.os_width}}  "
            f"{name:{fill}{align}{self.name_width}}  "
            f"{ami:{fill}{align}{self.ami_width}}"
        )

    def render(self, details: Sequence[Candidate]) -> str:
        lines = ["", self._line(" OS ", " Name ", " AMI ", "-", "^")]
        for detail in details:
            lines.append(self._line(detail.family.label, detail.name, detail.ami, " ", "<"))
        lines.append(self._line("", "", "", "-", "^"))
        lines.append("")
        return "\n".join(lines) + "\n"


def render_table(details: Sequence[Candidate]) -> str:
    reporter = DetailsReporter()
    reporter.update_column_widths(details)
    return reporter.render(details)


def render_amis(details: Sequence[Candidate]) -> str:
    """Bare AMI ids. A single id is written without a trailing newline."""
    if len(details) == 1:
        return details[0].ami
    return "".join(f"{detail.ami}\n" for detail in details)


def render_smoke_test(detail: Candidate, architecture: Architecture) -> str:
    """Arguments for `aws ec2 run-instances` launching the selected image."""
    return f'--image-id "{detail.ami}" --instance-type "{architecture.instance_group}.medium"'
