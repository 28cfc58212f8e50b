from fastapi import APIRouter, HTTPException

from aoplog.aop import controller_log
from aoplog.schemas import UserCreate, UserOut
from aoplog.services.users import UserService

router = APIRouter(prefix="/users", tags=["users"])


class UserController:
    def __init__(self, service: UserService):
        self.service = service

    @controller_log(description="fetch user")
    def get_user(self, user_id: int) -> UserOut:
        user = self.service.get_user(user_id)
        if user is None:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    @controller_log(description="create user")
    def create_user(self, payload: UserCreate) -> UserOut:
        return self.service.create_user(payload)

    @controller_log(description="list users", asynchronous=True)
    async def list_users(self) -> list[UserOut]:
        return self.service.list_users()

    @controller_log(description="recalculate user score")
    def recalculate_score(self, user_id: int) -> dict[str, int]:
        if self.service.get_user(user_id) is None:
            raise HTTPException(status_code=404, detail="User not found")
        return {"user_id": user_id, "score": self.service.recalculate_score(user_id)}


controller = UserController(UserService())


@router.get("", response_model=list[UserOut])
async def list_users():
    return await controller.list_users()


@router.post("", response_model=UserOut, status_code=201)
def create_user(payload: UserCreate):
    return controller.create_user(payload)


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: int):
    return controller.get_user(user_id)


@router.post("/{user_id}/score")
def recalculate_score(user_id: int):
    return controller.recalculate_score(user_id)
