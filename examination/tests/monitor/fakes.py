"""
Test-Doubles für den clientseitigen Monitor: Ereignisquelle und Uhr.
"""


class FakeEventSource:
    def __init__(self):
        self.listeners = {}

    def add_listener(self, event, callback):
        self.listeners.setdefault(event, []).append(callback)

    def remove_listener(self, event, callback):
        self.listeners[event].remove(callback)
        if not self.listeners[event]:
            del self.listeners[event]

    def fire(self, event, details=""):
        for callback in list(self.listeners.get(event, [])):
            callback(details)


class FakeClock:
    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds
