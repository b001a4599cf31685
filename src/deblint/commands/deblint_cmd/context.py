import argparse
import dataclasses
import logging
import os
from typing import (
    Optional,
    Union,
    Sequence,
    Callable,
    Dict,
    List,
    TYPE_CHECKING,
)

from deblint.configuration import (
    DEFAULT_PRESET,
    Configuration,
    Preset,
    find_preset,
)
from deblint.control_types import ControlType
from deblint.util import (
    _error,
    setup_logging,
    change_log_level,
)

if TYPE_CHECKING:
    from argparse import _SubParsersAction


CommandHandler = Callable[["CommandContext"], None]
ArgparserConfigurator = Callable[[argparse.ArgumentParser], None]


def add_arg(
    *name_or_flags: str,
    **kwargs,
) -> Callable[[argparse.ArgumentParser], None]:
    def _configurator(argparser: argparse.ArgumentParser) -> None:
        argparser.add_argument(
            *name_or_flags,
            **kwargs,
        )

    return _configurator


@dataclasses.dataclass(slots=True, frozen=True)
class CommandArg:
    parsed_args: argparse.Namespace


def _split_check_names(values: Optional[Sequence[str]]) -> List[str]:
    if not values:
        return []
    return [n.strip() for v in values for n in v.split(",") if n.strip()]


class CommandContext:
    def __init__(self, parsed_args: argparse.Namespace) -> None:
        self.parsed_args = parsed_args
        self._configuration: Optional[Configuration] = None

    @property
    def preset(self) -> Preset:
        name = getattr(self.parsed_args, "preset", None)
        if name is None:
            return DEFAULT_PRESET
        return find_preset(name)

    @property
    def checked_type(self) -> ControlType:
        type_name = getattr(self.parsed_args, "control_type", None)
        if type_name is None:
            return ControlType.COPYRIGHT
        return ControlType.from_type_name(type_name)

    @property
    def target_file(self) -> str:
        target_file = getattr(self.parsed_args, "target_file", None)
        if target_file is None:
            return self.checked_type.default_file
        return target_file

    def configuration(self) -> Configuration:
        """The configuration selected by the preset, type and check overrides"""
        config = self._configuration
        if config is None:
            parsed_args = self.parsed_args
            config = self.preset.configuration.with_overrides(
                enable=_split_check_names(getattr(parsed_args, "enable", None)),
                disable=_split_check_names(getattr(parsed_args, "disable", None)),
            ).for_file(self.checked_type, self.target_file)
            self._configuration = config
        return config


class CommandBase:
    __slots__ = ()

    def configure(self, argparser: argparse.ArgumentParser) -> None:
        # Does nothing by default
        pass

    def __call__(self, command_arg: CommandArg) -> None:
        raise NotImplementedError


class SubcommandBase(CommandBase):
    __slots__ = ("name", "help_description")

    def __init__(
        self,
        name: str,
        *,
        help_description: Optional[str] = None,
    ) -> None:
        self.name = name
        self.help_description = help_description

    def add_subcommand_to_subparser(
        self,
        subparser: "_SubParsersAction",
    ) -> argparse.ArgumentParser:
        parser = subparser.add_parser(
            self.name,
            help=self.help_description,
            allow_abbrev=False,
        )
        self.configure(parser)
        return parser


class GenericSubCommand(SubcommandBase):
    __slots__ = (
        "_handler",
        "_configure_handler",
        "_log_only_to_stderr",
    )

    def __init__(
        self,
        name: str,
        handler: Callable[[CommandContext], None],
        *,
        help_description: Optional[str] = None,
        configure_handler: Optional[Callable[[argparse.ArgumentParser], None]] = None,
        log_only_to_stderr: bool = False,
    ) -> None:
        super().__init__(name, help_description=help_description)
        self._handler = handler
        self._configure_handler = configure_handler
        self._log_only_to_stderr = log_only_to_stderr

    def configure_handler(
        self,
        handler: Callable[[argparse.ArgumentParser], None],
    ) -> None:
        if self._configure_handler is not None:
            raise TypeError("Only one argument handler can be provided")
        self._configure_handler = handler

    def configure(self, argparser: argparse.ArgumentParser) -> None:
        handler = self._configure_handler
        if handler is not None:
            handler(argparser)

    def __call__(self, command_arg: CommandArg) -> None:
        context = CommandContext(command_arg.parsed_args)
        if self._log_only_to_stderr:
            setup_logging(reconfigure_logging=True, log_only_to_stderr=True)

        if (
            getattr(context.parsed_args, "debug_mode", False)
            or os.environ.get("DEBLINT_DEBUG", "") != ""
        ):
            change_log_level(logging.DEBUG)
        else:
            change_log_level(logging.INFO)
        return self._handler(context)


class DispatchingCommandMixin(CommandBase):
    __slots__ = ()

    def add_subcommand(self, subcommand: SubcommandBase) -> None:
        raise NotImplementedError

    def register_subcommand(
        self,
        name: str,
        *,
        help_description: Optional[str] = None,
        argparser: Optional[
            Union[ArgparserConfigurator, Sequence[ArgparserConfigurator]]
        ] = None,
        log_only_to_stderr: bool = False,
    ) -> Callable[[CommandHandler], GenericSubCommand]:
        if argparser is not None and not callable(argparser):
            args = argparser

            def _wrapper(parser: argparse.ArgumentParser) -> None:
                for configurator in args:
                    configurator(parser)

            argparser = _wrapper

        def _annotation_impl(func: CommandHandler) -> GenericSubCommand:
            subcommand = GenericSubCommand(
                name,
                func,
                help_description=help_description,
                log_only_to_stderr=log_only_to_stderr,
            )
            self.add_subcommand(subcommand)
            if argparser is not None:
                subcommand.configure_handler(argparser)

            return subcommand

        return _annotation_impl


class DispatcherCommand(SubcommandBase, DispatchingCommandMixin):
    __slots__ = (
        "_subcommands",
        "_dest",
        "_metavar",
        "_argparser",
    )

    def __init__(
        self,
        name: str,
        dest: str,
        *,
        help_description: Optional[str] = None,
        metavar: str = "command",
    ) -> None:
        super().__init__(name, help_description=help_description)
        self._subcommands: Dict[str, SubcommandBase] = {}
        self._dest = dest
        self._metavar = metavar
        self._argparser: Optional[argparse.ArgumentParser] = None

    def add_subcommand(self, subcommand: SubcommandBase) -> None:
        if subcommand.name in self._subcommands:
            raise ValueError(
                f"Internal error: Multiple handlers for {subcommand.name} on topic {self.name}"
            )
        self._subcommands[subcommand.name] = subcommand

    def configure(self, argparser: argparse.ArgumentParser) -> None:
        # Reconfiguring replaces the parser, so `main` can be called repeatedly
        self._argparser = argparser
        subcommands = self._subcommands
        if not subcommands:
            raise ValueError(
                f"Internal error: No subcommands for subcommand {self.name} (then why do we have it?)"
            )
        subparser = argparser.add_subparsers(
            dest=self._dest,
            required=True,
            metavar=self._metavar,
        )
        for subcommand in subcommands.values():
            subcommand.add_subcommand_to_subparser(subparser)

    def has_command(self, command: str) -> bool:
        return command in self._subcommands

    def __call__(self, command_arg: CommandArg) -> None:
        argparser = self._argparser
        assert argparser is not None
        v = getattr(command_arg.parsed_args, self._dest, None)
        if v is None:
            _error("Missing command", prog=argparser.prog)
        assert (
            v in self._subcommands
        ), f"Internal error: {v} was accepted as a topic, but it was not registered?"
        self._subcommands[v](command_arg)


ROOT_COMMAND = DispatcherCommand(
    "root",
    dest="command",
    metavar="COMMAND",
)
