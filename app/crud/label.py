"""CRUD operations for Label and PostLabel."""

from collections import defaultdict
from typing import Dict, Iterable, List

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.crud.base import CRUDBase
from app.models.label import Label, PostLabel


class CRUDLabel(CRUDBase[Label, dict, dict]):
    """Label lookups and post-label association.

    Write helpers only flush; the caller owns the transaction.
    """

    def get_all_captions(self, db: Session) -> List[str]:
        stmt = select(Label.caption).order_by(Label.caption)
        return list(db.scalars(stmt).all())

    def get_or_create(self, db: Session, caption: str) -> Label:
        label = db.scalars(select(Label).where(Label.caption == caption).limit(1)).first()
        if label is None:
            label = Label(caption=caption)
            db.add(label)
            db.flush()
        return label

    def add_post_labels(self, db: Session, *, post_id: int, captions: Iterable[str]) -> None:
        """Attach captions to a post, creating missing labels; existing pairs are left alone."""
        for caption in captions:
            label = self.get_or_create(db, caption)
            if db.get(PostLabel, {"post_id": post_id, "label_id": label.id}) is None:
                db.add(PostLabel(post_id=post_id, label_id=label.id))
        db.flush()

    def sync_post_labels(self, db: Session, *, post_id: int, captions: List[str]) -> None:
        """Make the post's label set equal to `captions`."""
        rows = db.execute(
            select(Label.caption, PostLabel.label_id)
            .join(Label, Label.id == PostLabel.label_id)
            .where(PostLabel.post_id == post_id)
        ).all()
        existing = {caption: label_id for caption, label_id in rows}

        to_delete = [label_id for caption, label_id in existing.items() if caption not in captions]
        to_add = [caption for caption in captions if caption not in existing]

        for label_id in to_delete:
            link = db.get(PostLabel, {"post_id": post_id, "label_id": label_id})
            if link is not None:
                db.delete(link)
        if to_add:
            self.add_post_labels(db, post_id=post_id, captions=to_add)
        db.flush()

    def get_captions_for_post(self, db: Session, post_id: int) -> List[str]:
        return self.get_captions_by_post(db, [post_id]).get(post_id, [])

    def get_captions_by_post(self, db: Session, post_ids: List[int]) -> Dict[int, List[str]]:
        """Fetch labels for many posts in one query, grouped by post id."""
        if not post_ids:
            return {}
        stmt = (
            select(PostLabel.post_id, Label.caption)
            .join(Label, Label.id == PostLabel.label_id)
            .where(PostLabel.post_id.in_(post_ids))
            .order_by(Label.caption)
        )
        grouped: Dict[int, List[str]] = defaultdict(list)
        for post_id, caption in db.execute(stmt).all():
            grouped[post_id].append(caption)
        return dict(grouped)


crud_label = CRUDLabel(Label)
