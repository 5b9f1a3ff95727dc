# spa_booking/routers/clients.py
# PATCH = ALLOWED, DELETE = soft-delete (is_active)

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.tables import Clients as DBClients
from ..schemas.clients import (
    ClientCreate,
    ClientUpdate,
    ClientRead,
)

router = APIRouter(prefix="/clients", tags=["clients"])


@router.get("/", response_model=list[ClientRead])
def list_clients(db: Session = Depends(get_db)):
    return (
        db.query(DBClients)
        .filter(DBClients.is_active == 1)
        .order_by(DBClients.last_name, DBClients.first_name, DBClients.id)
        .all()
    )


@router.get("/{id}", response_model=ClientRead)
def get_client(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBClients, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.post("/", response_model=ClientRead, status_code=status.HTTP_201_CREATED)
def create_client(
    data: ClientCreate,
    db: Session = Depends(get_db),
):
    obj = DBClients(**data.model_dump())
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@router.patch("/{id}", response_model=ClientRead)
def update_client(
    id: int,
    data: ClientUpdate,
    db: Session = Depends(get_db),
):
    obj = db.get(DBClients, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(obj, field, value)

    db.commit()
    db.refresh(obj)
    return obj


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_client(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBClients, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    obj.is_active = 0
    db.commit()
