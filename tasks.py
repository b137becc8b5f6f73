"""Owner-scoped task repository.

Every method takes the verified owner id first. Rows are always addressed by
the ``(id, user_id)`` pair inside a single statement, so a task owned by
someone else looks exactly like a task that does not exist.
"""

import logging

from sqlalchemy import delete, select, update

from models import Task
from schemas import TaskCreate, TaskUpdate, parse

logger = logging.getLogger(__name__)


class TaskRepository:
    def __init__(self, session):
        self.session = session

    def _owned(self, owner_id, task_id):
        return select(Task).where(Task.id == task_id, Task.user_id == owner_id)

    def list(self, owner_id):
        query = (
            select(Task)
            .where(Task.user_id == owner_id)
            .order_by(Task.created_at.desc(), Task.id.desc())
        )
        return list(self.session.execute(query).scalars())

    def get_by_id(self, owner_id, task_id):
        return self.session.execute(self._owned(owner_id, task_id)).scalar_one_or_none()

    def create(self, owner_id, title, description=None, status=None):
        fields = {"title": title}
        if description is not None:
            fields["description"] = description
        if status is not None:
            fields["status"] = status
        data = parse(TaskCreate, fields)

        task = Task(title=data.title, description=data.description, status=data.status, user_id=owner_id)
        self.session.add(task)
        self.session.commit()
        logger.debug("Created task %s for %s", task.id, owner_id)
        return task

    def update(self, owner_id, task_id, fields):
        """Apply the supplied fields and return the updated task.

        Returns None when the task does not exist or belongs to someone else.
        Raises ValidationError before anything is written.
        """
        changes = parse(TaskUpdate, fields).changes()
        if not changes:
            return self.get_by_id(owner_id, task_id)

        result = self.session.execute(
            update(Task)
            .where(Task.id == task_id, Task.user_id == owner_id)
            .values(**changes)
            .execution_options(synchronize_session=False)
        )
        self.session.commit()
        if result.rowcount == 0:
            return None
        return self.get_by_id(owner_id, task_id)

    def delete_by_id(self, owner_id, task_id):
        task = self.get_by_id(owner_id, task_id)
        if task is None:
            return None
        # Keep the loaded copy readable after its row is gone.
        self.session.expunge(task)
        result = self.session.execute(
            delete(Task)
            .where(Task.id == task_id, Task.user_id == owner_id)
            .execution_options(synchronize_session=False)
        )
        self.session.commit()
        if result.rowcount == 0:
            # Lost a race with a concurrent delete of the same task.
            return None
        return task

    def delete_all_for_owner(self, owner_id, commit=True):
        result = self.session.execute(
            delete(Task).where(Task.user_id == owner_id).execution_options(synchronize_session=False)
        )
        if commit:
            self.session.commit()
        return result.rowcount
