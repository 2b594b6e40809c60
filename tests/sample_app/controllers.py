class HomeController:
    def index(self):
        return "home"


class UserController:
    def index(self):
        return []

    def store(self, payload: dict):
        return payload

    def destroy(self, id: int):
        return None


class PostController:
    def index(self):
        return []


class UserService:
    pass


class AdminDashboard:
    def __call__(self):
        return "dashboard"
