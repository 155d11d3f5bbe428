"""License declarations rendered into the COPYRIGHT AND LICENSE section."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional, Tuple

from jinja2 import Environment, StrictUndefined

_ENVIRONMENT = Environment(undefined=StrictUndefined, keep_trailing_newline=True)

DEFAULT_NOTICE = """\
This software is Copyright (c) {{ year }} by {{ holder }}.

This is free software, licensed under:

  {{ name }}
"""


class License:
    """A license granted by ``holder``; subclasses describe a concrete license."""

    short_name: ClassVar[str] = ""
    name: ClassVar[str] = ""
    url: ClassVar[Optional[str]] = None
    aliases: ClassVar[Tuple[str, ...]] = ()
    notice_template: ClassVar[str] = DEFAULT_NOTICE

    def __init__(self, holder: str, year: Optional[int] = None) -> None:
        self.holder = holder
        self.year = year if year is not None else datetime.now().year

    def notice(self) -> str:
        """Return the copyright and license notice as plain text."""
        template = _ENVIRONMENT.from_string(self.notice_template)
        return template.render(year=self.year, holder=self.holder, name=self.name, url=self.url)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(holder={self.holder!r}, year={self.year})"


class Perl_5(License):
    short_name = "Perl_5"
    name = "The Perl 5 License (Artistic 1 & GPL 1)"
    aliases = ("perl",)
    notice_template = """\
This software is copyright (c) {{ year }} by {{ holder }}.

This is free software; you can redistribute it and/or modify it under
the same terms as the Perl 5 programming language system itself.
"""


class GPL_1(License):
    short_name = "GPL_1"
    name = "The GNU General Public License, Version 1, February 1989"
    url = "https://www.gnu.org/licenses/old-licenses/gpl-1.0.txt"


class GPL_2(License):
    short_name = "GPL_2"
    name = "The GNU General Public License, Version 2, June 1991"
    url = "https://www.gnu.org/licenses/old-licenses/gpl-2.0.txt"


class GPL_3(License):
    short_name = "GPL_3"
    name = "The GNU General Public License, Version 3, June 2007"
    url = "https://www.gnu.org/licenses/gpl-3.0.txt"


class LGPL_2_1(License):
    short_name = "LGPL_2_1"
    name = "The GNU Lesser General Public License, Version 2.1, February 1999"
    url = "https://www.gnu.org/licenses/old-licenses/lgpl-2.1.txt"


class LGPL_3_0(License):
    short_name = "LGPL_3_0"
    name = "The GNU Lesser General Public License, Version 3, June 2007"
    url = "https://www.gnu.org/licenses/lgpl-3.0.txt"
    aliases = ("LGPL_3",)


class Artistic_1_0(License):
    short_name = "Artistic_1_0"
    name = "The Artistic License 1.0"
    aliases = ("Artistic", "Artistic_1")


class Artistic_2_0(License):
    short_name = "Artistic_2_0"
    name = "The Artistic License 2.0 (GPL Compatible)"
    url = "https://www.perlfoundation.org/artistic-license-20.html"
    aliases = ("Artistic_2",)


class MIT(License):
    short_name = "MIT"
    name = "The MIT (X11) License"
    aliases = ("X11",)


class BSD(License):
    short_name = "BSD"
    name = "The (three-clause) BSD License"
    aliases = ("BSD_3_Clause",)


class Apache_2_0(License):
    short_name = "Apache_2_0"
    name = "The Apache License, Version 2.0, January 2004"
    url = "https://www.apache.org/licenses/LICENSE-2.0"
    aliases = ("Apache_2",)


BUILTIN_LICENSES: Tuple[type[License], ...] = (
    Perl_5,
    GPL_1,
    GPL_2,
    GPL_3,
    LGPL_2_1,
    LGPL_3_0,
    Artistic_1_0,
    Artistic_2_0,
    MIT,
    BSD,
    Apache_2_0,
)

__all__ = ["BUILTIN_LICENSES", "DEFAULT_NOTICE", "License"] + [cls.__name__ for cls in BUILTIN_LICENSES]
