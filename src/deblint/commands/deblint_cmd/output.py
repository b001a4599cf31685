import argparse
import sys
from typing import IO, Optional, Sequence

import colored

_SUPPORTED_COLORS = {
    "black",
    "red",
    "green",
    "yellow",
    "blue",
    "magenta",
    "cyan",
    "white",
}
_SUPPORTED_STYLES = {"none", "bold"}


def _check_styling(
    fg: Optional[str],
    bg: Optional[str],
    style: Optional[str],
) -> None:
    for color in (fg, bg):
        if color is not None and color not in _SUPPORTED_COLORS:
            raise ValueError(
                f"Unsupported color: {color}. Only the following are supported {','.join(_SUPPORTED_COLORS)}"
            )
    if style is not None and style not in _SUPPORTED_STYLES:
        raise ValueError(
            f"Unsupported style: {style}. Only the following are supported {','.join(_SUPPORTED_STYLES)}"
        )


class OutputStylingBase:
    """Plain text output, used when the stream is not a terminal"""

    def __init__(self, stream: IO[str], output_format: str) -> None:
        self.stream = stream
        self.output_format = output_format

    @property
    def supports_colors(self) -> bool:
        return False

    def colored(
        self,
        text: str,
        *,
        fg: Optional[str] = None,
        bg: Optional[str] = None,
        style: Optional[str] = None,
    ) -> str:
        _check_styling(fg, bg, style)
        return text

    def print_list_table(
        self,
        headers: Sequence[str],
        rows: Sequence[Sequence[str]],
    ) -> None:
        if not headers:
            raise ValueError("No headers provided!?")
        if any(len(r) != len(headers) for r in rows):
            raise ValueError(
                "Unbalanced table: All rows must have the same column count as the headers"
            )

        if self.output_format == "csv":
            from csv import writer

            w = writer(self.stream)
            w.writerow(headers)
            w.writerows(rows)
            return

        column_lengths = [
            max((len(h), max((len(r[i]) for r in rows), default=0)))
            for i, h in enumerate(headers)
        ]
        # divider => "+---+---+-...-+"
        divider = "+-" + "-+-".join("-" * x for x in column_lengths) + "-+"

        def _row(cells: Sequence[str]) -> str:
            inner = " | ".join(f"{c:<{x}}" for c, x in zip(cells, column_lengths))
            return f"| {inner} |"

        header_row = _row(headers)
        if self.supports_colors:
            header_row = colored.Style.bold + header_row + colored.Style.reset

        self.print(divider)
        self.print(header_row)
        self.print(divider)
        for row in rows:
            self.print(_row(row))
        self.print(divider)

    def print(self, /, string: str = "", **kwargs) -> None:
        if "file" in kwargs:
            raise ValueError("Unsupported kwarg file")
        print(string, file=self.stream, **kwargs)


class ANSIOutputStylingBase(OutputStylingBase):
    @property
    def supports_colors(self) -> bool:
        return True

    def colored(
        self,
        text: str,
        *,
        fg: Optional[str] = None,
        bg: Optional[str] = None,
        style: Optional[str] = None,
    ) -> str:
        _check_styling(fg, bg, style)
        codes = []
        if style is not None:
            codes.append(getattr(colored.Style, style))
        if fg is not None:
            codes.append(getattr(colored.Fore, fg))
        if bg is not None:
            codes.append(getattr(colored.Back, bg))
        if not codes:
            return text
        return "".join(codes) + text + colored.Style.reset


def no_fancy_output(
    stream: Optional[IO[str]] = None,
    output_format: str = "text",
) -> OutputStylingBase:
    if stream is None:
        stream = sys.stdout
    return OutputStylingBase(stream, output_format)


def _output_styling(
    parsed_args: argparse.Namespace,
    stream: IO[str],
) -> OutputStylingBase:
    output_format = getattr(parsed_args, "output_format", None)
    if output_format is None:
        output_format = "text"
    if not stream.isatty():
        return no_fancy_output(stream, output_format)
    return ANSIOutputStylingBase(stream, output_format)
