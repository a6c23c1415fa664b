"""Classification of listing-tool switches.

Splits the caller's arguments into switches and targets, records which
formatting modes are active, and rewrites the switch list so the listing
tool always prints one entry per line.
"""

from __future__ import annotations

from dataclasses import dataclass

# Short switches that consume an argument (attached or as the next word).
_SHORT_WITH_VALUE = frozenset("ITw")
# Long switches that consume the next word when no ``=`` is attached.
_LONG_WITH_VALUE = frozenset(
    {
        "--block-size",
        "--format",
        "--hide",
        "--ignore",
        "--indicator-style",
        "--quoting-style",
        "--sort",
        "--tabsize",
        "--time",
        "--time-style",
        "--width",
    }
)

_LONG_FORMAT_SHORT = frozenset("lgon")
_CLASSIFY_SHORT = frozenset("Fp")
_MULTI_COLUMN_SHORT = frozenset("Cxm")
_STRIPPED_SHORT = _MULTI_COLUMN_SHORT | {"D"}
_LONG_FORMAT_VALUES = frozenset({"long", "verbose"})
_STRIPPED_FORMAT_VALUES = frozenset({"across", "commas", "horizontal", "vertical", "single-column"})
_CLASSIFY_STYLES = frozenset({"classify", "file-type", "slash"})
_LONG_FORMAT_FLAGS = frozenset({"--full-time", "--numeric-uid-gid"})


@dataclass(frozen=True)
class ListingMode:
    """Formatting modes that change how listing lines must be parsed."""

    long_format: bool = False
    classify: bool = False
    quoted: bool = False
    directory_as_file: bool = False
    recursive: bool = False
    color: str | None = None
    # ``-s`` prints a ``total N`` line without long format.
    block_sizes: bool = False


@dataclass(frozen=True)
class ListingInvocation:
    """Rewritten switches, targets and the modes they imply."""

    switches: tuple[str, ...]
    targets: tuple[str, ...]
    mode: ListingMode

    @property
    def expects_headers(self) -> bool:
        """The listing tool prints ``<path>:`` headers for recursion or several targets."""
        return self.mode.recursive or len(self.targets) > 1


def _long_name_value(arg: str) -> tuple[str, str | None]:
    if "=" in arg:
        name, value = arg.split("=", 1)
        return name, value
    return arg, None


def _apply_long(name: str, value: str | None, flags: dict[str, object]) -> bool:
    """Record the mode implied by one long switch; return ``False`` to drop it."""
    if name == "--format":
        if value in _LONG_FORMAT_VALUES:
            flags["long_format"] = True
            return True
        if value in _STRIPPED_FORMAT_VALUES:
            return False
        return True
    if name == "--dired":
        return False
    if name in _LONG_FORMAT_FLAGS:
        flags["long_format"] = True
    elif name in {"--classify", "--file-type"}:
        flags["classify"] = True
    elif name == "--indicator-style":
        flags["classify"] = value in _CLASSIFY_STYLES
    elif name == "--quote-name":
        flags["quoted"] = True
    elif name == "--quoting-style":
        flags["quoted"] = value == "c"
    elif name == "--directory":
        flags["directory_as_file"] = True
    elif name == "--recursive":
        flags["recursive"] = True
    elif name == "--size":
        flags["block_sizes"] = True
    elif name == "--color":
        flags["color"] = value or "always"
    return True


def _apply_short_cluster(cluster: str, flags: dict[str, object]) -> tuple[str, bool]:
    """Filter one ``-abc`` cluster.

    Returns the rewritten cluster (``""`` when every letter was dropped) and
    whether its last switch still needs the following word as its value.
    """
    kept: list[str] = []
    index = 0
    while index < len(cluster):
        letter = cluster[index]
        if letter in _SHORT_WITH_VALUE:
            kept.append(cluster[index:])
            return "".join(kept), index == len(cluster) - 1
        index += 1
        if letter in _STRIPPED_SHORT:
            continue
        if letter in _LONG_FORMAT_SHORT:
            flags["long_format"] = True
        elif letter in _CLASSIFY_SHORT:
            flags["classify"] = True
        elif letter == "Q":
            flags["quoted"] = True
        elif letter == "d":
            flags["directory_as_file"] = True
        elif letter == "R":
            flags["recursive"] = True
        elif letter == "s":
            flags["block_sizes"] = True
        kept.append(letter)
    return "".join(kept), False


def parse_listing_args(args: list[str] | tuple[str, ...]) -> ListingInvocation:
    """Classify listing arguments and force single-column output.

    Multi-column, comma-separated and dired switches are removed, ``-1`` is
    always prepended, and option values are kept next to their switch so
    they are never mistaken for targets.
    """
    flags: dict[str, object] = {}
    switches: list[str] = ["-1"]
    targets: list[str] = []
    pending_value = False
    only_targets = False

    for arg in args:
        if pending_value:
            switches.append(arg)
            pending_value = False
            continue
        if only_targets or arg == "-" or not arg.startswith("-"):
            targets.append(arg)
            continue
        if arg == "--":
            only_targets = True
            continue
        if arg.startswith("--"):
            name, value = _long_name_value(arg)
            if name in _LONG_WITH_VALUE and value is None:
                # Value arrives as the next word; classify once it is known.
                pending_value = True
                switches.append(arg)
                continue
            if _apply_long(name, value, flags):
                switches.append(arg)
            continue
        cluster, pending_value = _apply_short_cluster(arg[1:], flags)
        if cluster:
            switches.append(f"-{cluster}")

    switches = _classify_detached_values(switches, flags)
    mode = ListingMode(
        long_format=bool(flags.get("long_format", False)),
        classify=bool(flags.get("classify", False)),
        quoted=bool(flags.get("quoted", False)),
        directory_as_file=bool(flags.get("directory_as_file", False)),
        recursive=bool(flags.get("recursive", False)),
        block_sizes=bool(flags.get("block_sizes", False)),
        color=flags.get("color") if isinstance(flags.get("color"), str) else None,
    )
    return ListingInvocation(switches=tuple(switches), targets=tuple(targets), mode=mode)


def _classify_detached_values(switches: list[str], flags: dict[str, object]) -> list[str]:
    """Apply ``--name VALUE`` pairs, dropping pairs that select a stripped format."""
    out: list[str] = []
    index = 0
    while index < len(switches):
        arg = switches[index]
        if arg in _LONG_WITH_VALUE and index + 1 < len(switches):
            value = switches[index + 1]
            if _apply_long(arg, value, flags):
                out.extend([arg, value])
            index += 2
            continue
        out.append(arg)
        index += 1
    return out


def with_color_switch(invocation: ListingInvocation, enabled: bool) -> ListingInvocation:
    """Ask the listing tool for colored output when the caller did not choose."""
    if invocation.mode.color is not None or not enabled:
        return invocation
    return ListingInvocation(
        switches=(*invocation.switches, "--color=always"),
        targets=invocation.targets,
        mode=invocation.mode,
    )
