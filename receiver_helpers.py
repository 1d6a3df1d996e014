"""Вспомогательные функции тестов ресиверов."""


def log4net_event(message, level="INFO", logger="App", timestamp=1420070400000, thread="1"):
    return (
        f'<log4j:event logger="{logger}" timestamp="{timestamp}" level="{level}" thread="{thread}">'
        f"<log4j:message>{message}</log4j:message></log4j:event>\n"
    )


def append(path, text):
    with open(path, "a", encoding="utf-8") as f:
        f.write(text)
