"""Tests for intcode.io — channels, input sources, and the feedback buffer."""

import io
import itertools
import threading

import pytest

from intcode.errors import (
    FeedbackDeadlock,
    InputExhausted,
    NoInputConfigured,
    ParseError,
)
from intcode.io import (
    FeedbackBuffer,
    InputQueue,
    IOChannel,
    console_input,
    console_output,
    with_prefix,
)
from intcode.vm import IntcodeVM


class TestIOChannel:
    def test_read_in_order(self):
        channel = IOChannel(input=[1, 2, 3])
        assert [channel.read(), channel.read(), channel.read()] == [1, 2, 3]

    def test_read_without_input_raises(self):
        with pytest.raises(NoInputConfigured):
            IOChannel().read()

    def test_read_past_end_raises(self):
        channel = IOChannel(input=[1])
        channel.read()
        with pytest.raises(InputExhausted):
            channel.read()

    def test_input_can_be_replaced(self):
        channel = IOChannel(input=[1])
        channel.input = [9]
        assert channel.read() == 9

    def test_input_can_be_cleared(self):
        channel = IOChannel(input=[1])
        channel.input = None
        with pytest.raises(NoInputConfigured):
            channel.read()

    def test_write_calls_sink(self):
        seen = []
        IOChannel(output=seen.append).write(5)
        assert seen == [5]

    def test_write_without_sink_is_silent(self):
        IOChannel().write(5)

    def test_infinite_input(self):
        channel = IOChannel(input=itertools.count())
        assert [channel.read() for _ in range(3)] == [0, 1, 2]


class TestWithPrefix:
    def test_prefix_comes_first(self):
        assert list(with_prefix([9], [1, 2])) == [9, 1, 2]

    def test_source_pulled_lazily(self):
        pulled = []

        def source():
            pulled.append(True)
            yield 1

        combined = with_prefix([9], source())
        assert next(combined) == 9
        assert pulled == []


class TestInputQueue:
    def test_delivers_pushed_values_in_order(self):
        queue = InputQueue([1])
        queue.push(2, 3)
        assert list(queue) == [1, 2, 3]

    def test_empty_queue_reports_exhaustion_once(self):
        queue = InputQueue()
        channel = IOChannel(input=queue)
        with pytest.raises(InputExhausted):
            channel.read()
        queue.push(4)
        assert channel.read() == 4

    def test_len(self):
        queue = InputQueue([1, 2])
        next(queue)
        assert len(queue) == 1


class TestConsole:
    def test_console_input_parses_lines(self):
        assert list(console_input(io.StringIO("1\n -2 \n30\n"))) == [1, -2, 30]

    def test_console_input_rejects_non_integer(self):
        source = console_input(io.StringIO("1\nabc\n"))
        assert next(source) == 1
        with pytest.raises(ParseError, match="'abc' on input line 2") as excinfo:
            next(source)
        assert excinfo.value.index == 1
        assert "program" not in str(excinfo.value)

    def test_console_output_prints(self, capsys):
        console_output(17)
        assert capsys.readouterr().out == "Output: 17\n"


class TestFeedbackBuffer:
    def test_initial_values_served_first(self):
        buffer = FeedbackBuffer(initial=[7, 8], source=[9])
        assert list(buffer.reader()) == [7, 8, 9]

    def test_readers_have_independent_cursors(self):
        buffer = FeedbackBuffer(source=[1, 2, 3])
        first = buffer.reader()
        second = buffer.reader()
        assert next(first) == 1
        assert next(first) == 2
        assert next(second) == 1
        assert first.position == 2
        assert second.position == 1

    def test_values_pulled_from_source_once(self):
        pulled = []

        def source():
            for value in (1, 2):
                pulled.append(value)
                yield value

        buffer = FeedbackBuffer(source=source())
        assert list(buffer.reader()) == [1, 2]
        assert list(buffer.reader()) == [1, 2]
        assert pulled == [1, 2]

    def test_history_is_append_only(self):
        buffer = FeedbackBuffer(initial=[0], source=[5, 6])
        reader = buffer.reader(position=2)
        assert next(reader) == 6
        assert buffer.history == (0, 5, 6)
        assert len(buffer) == 3

    def test_get_past_exhausted_source_returns_none(self):
        buffer = FeedbackBuffer(source=[1])
        assert buffer.get(0) == 1
        assert buffer.get(1) is None
        assert buffer.get(5) is None

    def test_get_without_source_raises(self):
        buffer = FeedbackBuffer(initial=[1])
        assert buffer.get(0) == 1
        with pytest.raises(NoInputConfigured):
            buffer.get(1)

    def test_attach_after_readers_exist(self):
        buffer = FeedbackBuffer(initial=[0])
        reader = buffer.reader()
        buffer.attach([1, 2])
        assert list(reader) == [0, 1, 2]

    def test_reentrant_pull_raises_deadlock(self):
        buffer = FeedbackBuffer(initial=[0])
        buffer.attach(buffer.reader(position=1))
        with pytest.raises(FeedbackDeadlock):
            buffer.get(1)

    def test_vm_echo_loop(self):
        # in → out → in ... for three rounds, adding one each time
        program = [
            3, 20, 1001, 20, 1, 20, 4, 20,
            1001, 21, 1, 21, 1007, 21, 3, 22, 1005, 22, 0, 99,
        ]  # fmt: skip
        buffer = FeedbackBuffer(initial=[10])
        vm = IntcodeVM(program, input=buffer.reader())
        buffer.attach(vm)
        assert list(buffer.reader()) == [10, 11, 12, 13]

    def test_concurrent_readers_see_same_history(self):
        buffer = FeedbackBuffer(source=range(200))
        results: list[list[int]] = []
        lock = threading.Lock()

        def consume():
            values = list(buffer.reader())
            with lock:
                results.append(values)

        threads = [threading.Thread(target=consume) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert results == [list(range(200))] * 4
