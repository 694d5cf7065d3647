from collections.abc import Sequence
from dataclasses import dataclass

from adorn import DecorationScope, behavior_super, unwrap


@dataclass
class Task:
    description: str
    done: bool = False


@dataclass
class UrgentTask(Task):
    deadline: str = "today"


class Views(DecorationScope):
    """Presentation behavior, kept out of the Task classes themselves."""


@Views.behaviors(object)
class ObjectView:
    def as_array(self):
        return [unwrap(self)]

    def render(self):
        return repr(unwrap(self))


@Views.behaviors(Sequence)
class SequenceView:
    def render(self):
        return "\n".join(Views.decorate(item).render() for item in self)


@Views.behaviors(str)
class StringView:
    def render(self):
        # A str is a Sequence of str; render it whole instead of per character
        return unwrap(self)


@Views.behaviors(list)
class ListView:
    def as_array(self):
        return unwrap(self)


@Views.behaviors(Task)
class TaskView:
    def render(self):
        mark = "x" if self.done else " "
        return f"[{mark}] {self.description}"

    def complete(self):
        self.done = True
        return self


@Views.behaviors(UrgentTask)
class UrgentTaskView:
    def render(self):
        return behavior_super(UrgentTask, self).render() + f" (due {self.deadline})"


def main() -> None:
    tasks = [
        Task("Collect data"),
        UrgentTask("Fix release", deadline="friday"),
        Task("Write report"),
    ]

    # Behaviors mutate the original objects
    Views.decorate(tasks[0]).complete()

    print(Views.decorate(tasks).render())
    print(Views.decorate(tasks).as_array() is tasks)
    print(Views.decorate(tasks[2]).as_array())
    print(Views.decorate("plain string").upper())
    print(Views.decorate(["ab", "cd"]).render())


if __name__ == "__main__":
    main()
