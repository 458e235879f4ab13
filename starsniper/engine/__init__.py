"""starsniper engine layer: everything below the menu loop.

Modules
-------
settings
    ``Settings``: file locations, splash timing, monitor path, debug flag (from env).

theme
    Output formatting injected into every component.
    - ``Tone``: semantic colors (info, ok, warn, error, banner, ...)
    - ``ColorTheme``: prompt_toolkit-styled output
    - ``PlainTheme``: null object for terminals without color
    - ``select_theme``: picks one for a stream (honors NO_COLOR)
    - ``appline`` / ``stamp``: "[<ISO time>] [App] ..." status line helpers

protocols
    ``Theme``, ``LoginPrompts``, ``OperatorPrompts``, ``MarketMonitor`` structural interfaces.

configstore
    - ``ConfigStore``: read / write (with single backup) of the JSON settings file
    - ``is_complete``: the one authoritative "ready to go online" check

sessionstore
    ``SessionStore``: the opaque Telethon StringSession blob on disk.

telegram
    ``TelegramGateway``: connect / interactive login / balance / disconnect,
    normalized into ``ConnectResult``.

state
    ``SessionState`` and ``ConnectionStatus``: the live client and its cached details.

monitor
    ``load_monitor``: resolves the external market monitor from "module:attribute".

banner
    Figlet title and the startup splash progress bar.
"""
