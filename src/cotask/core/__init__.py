"""
Engine core.

Components:
- signals.py: Pending / Ready suspension signals, Success / Failure results
- task.py: Task base class (explicit state machine) and leaf tasks
- plan.py: plan construction API (segments, await sites, captured environment)
- join.py: join combinator
- external.py: adapter turning a collaborator operation into a task
- ports.py: collaborator Protocol
- scheduler.py: single-threaded round-robin scheduler
- errors.py: engine exceptions
"""
