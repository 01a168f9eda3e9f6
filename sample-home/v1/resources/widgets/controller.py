from rik.controller import ResourceController
from rik.exceptions import NotFoundError, ValidationError

WIDGETS = {"1": {"id": "1", "name": "bolt"}}


class Controller(ResourceController):
    async def get(self, request, response, path_params, context):
        widget_id = path_params.get("id")
        if widget_id is None:
            return list(WIDGETS.values())
        if widget_id not in WIDGETS:
            raise NotFoundError(resource=context.resource, resource_id=widget_id)
        return WIDGETS[widget_id]

    async def post(self, request, response, path_params, context):
        body = await request.json()
        if not body.get("name"):
            raise ValidationError(message="Field 'name' is required", field="name")
        widget_id = str(len(WIDGETS) + 1)
        WIDGETS[widget_id] = {"id": widget_id, "name": body["name"]}
        response.status_code = 201
        response.headers["Location"] = f"{request.url.path}/{widget_id}"
        return WIDGETS[widget_id]

    async def delete(self, request, response, path_params, context):
        WIDGETS.pop(path_params["id"], None)
        response.status_code = 204
