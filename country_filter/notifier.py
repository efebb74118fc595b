import sys

from country_filter.logger import log_event


class Notifier:
    """Operator-facing messages.

    Every message goes to the durable log. It is echoed to stdout only when
    running in a terminal or when called from an upstream dispatcher.
    """

    def __init__(self, chained=False, interactive=None, stream=None, component="filter"):
        self.stream = stream if stream is not None else sys.stdout
        if interactive is None:
            interactive = _is_terminal(self.stream)
        self.interactive = interactive
        self.chained = chained
        self.component = component

    @property
    def echoes(self):
        return self.interactive or self.chained

    def notify(self, message, **fields):
        if not message:
            return
        if self.echoes:
            try:
                print(message, file=self.stream, flush=True)
            except Exception:
                pass
        log_event(self.component, message, **fields)


def _is_terminal(stream):
    try:
        return bool(stream.isatty())
    except Exception:
        return False
