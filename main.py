import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError
from pymongo.errors import DuplicateKeyError
from starlette.exceptions import HTTPException as StarletteHTTPException

import config
from auth import create_access_token, get_current_user, get_password_hash, public_user, require_admin, verify_password
from database import create_document, db, ensure_indexes, get_documents, to_object_id, update_document
from mock_data import gallery_for_category, gallery_for_section, is_gallery_section, populate_database
from api_response import error, ok
from schemas import ORDER_STATUSES, Content as ContentSchema, Order as OrderSchema, Product as ProductSchema, User as UserSchema

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if db is None:
        logger.warning("DATABASE_URL / DATABASE_NAME not set; running without a database")
    else:
        logger.info("Connected to MongoDB database %s", db.name)
        ensure_indexes()
        populate_database()
    yield


app = FastAPI(title="Negromate Creatives API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Error handlers: every failure leaves as the {msg, data, status} envelope
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error(str(exc.detail), exc.status_code, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return error(_validation_message(exc.errors()), status.HTTP_400_BAD_REQUEST)


@app.exception_handler(DuplicateKeyError)
async def duplicate_key_handler(request: Request, exc: DuplicateKeyError):
    return error("El recurso ya existe", status.HTTP_409_CONFLICT)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error("Ha ocurrido un error interno en el servidor.", status.HTTP_500_INTERNAL_SERVER_ERROR)


def _validation_message(errors) -> str:
    if not errors:
        return "Datos inválidos"
    first = errors[0]
    loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    return f"Datos inválidos: {loc}: {first.get('msg')}" if loc else f"Datos inválidos: {first.get('msg')}"


def _find_or_404(collection: str, doc_id: str, msg: str) -> dict:
    oid = to_object_id(doc_id)
    doc = db[collection].find_one({"_id": oid}) if oid else None
    if not doc:
        raise HTTPException(status_code=404, detail=msg)
    return doc


# Request models
class RegisterIn(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginIn(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserUpdate(BaseModel):
    username: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    role: Optional[str] = None


class ProductIn(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = None
    imageUrl: Optional[str] = None
    description: Optional[str] = None
    details: Optional[List[str]] = None


class ProductUpdate(ProductIn):
    pass


class OrderItemIn(BaseModel):
    product: str
    quantity: int = Field(1, ge=1)
    # Accepted for compatibility with older clients, never used for pricing
    price: Optional[float] = None


class OrderIn(BaseModel):
    orderItems: Optional[List[OrderItemIn]] = None


class OrderStatusIn(BaseModel):
    status: Optional[str] = None


class ContentIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    section: Optional[str] = None
    title: Optional[str] = None
    body: Optional[str] = None
    mainParagraph: Optional[str] = None
    artists: Optional[Dict[str, Any]] = None
    galleryImages: Optional[Dict[str, List[Dict[str, Any]]]] = None


class ContentUpdate(ContentIn):
    pass


def _set_fields(data: Optional[BaseModel]) -> dict:
    """Fields the client actually sent, minus explicit nulls."""
    if data is None:
        return {}
    return {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}


def _validated(schema, doc: dict, exclude_none: bool = False) -> dict:
    try:
        return schema(**doc).model_dump(exclude_none=exclude_none)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=_validation_message(exc.errors()))


# Routes
@app.get("/")
def root():
    return {"message": "API de Negromate Creatives funcionando correctamente"}


@app.get("/test")
def test_database():
    response = {
        "backend": "✅ Running",
        "database": "❌ Not Available",
        "database_url": "✅ Set" if config.DATABASE_URL else "❌ Not Set",
        "database_name": "✅ Set" if config.DATABASE_NAME else "❌ Not Set",
        "connection_status": "Not Connected",
        "collections": [],
    }
    if db is None:
        return response
    try:
        response["collections"] = db.list_collection_names()[:10]
        response["database"] = "✅ Connected & Working"
        response["connection_status"] = "Connected"
    except Exception as e:
        logger.warning("Database check failed: %s", e)
        response["database"] = f"⚠️  Connected but Error: {str(e)[:50]}"
    return response


# ----------------------- Auth -----------------------
@app.post("/api/auth/register")
def register(payload: RegisterIn):
    if not (payload.username and payload.username.strip() and payload.email and payload.password):
        raise HTTPException(status_code=400, detail="Todos los campos son obligatorios")

    email = payload.email.strip().lower()
    if db["user"].find_one({"email": email}):
        raise HTTPException(status_code=409, detail="El email ya está registrado")

    try:
        user = UserSchema(
            username=payload.username.strip(),
            email=email,
            password_hash=get_password_hash(payload.password),
        )
    except ValidationError:
        raise HTTPException(status_code=400, detail="Por favor, introduce un email válido")

    user_id = create_document("user", user)
    logger.info("Registered user %s", user_id)
    data = {
        "_id": user_id,
        "username": user.username,
        "email": user.email,
        "role": user.role,
        "token": create_access_token(user_id),
    }
    return ok("Usuario registrado con éxito", data, status_code=201)


@app.post("/api/auth/login")
def login(payload: LoginIn):
    email = (payload.email or "").strip().lower()
    user = db["user"].find_one({"email": email}) if email else None
    if not user or not verify_password(payload.password or "", user.get("password_hash", "")):
        logger.warning("Failed login for %s", email or "<empty>")
        raise HTTPException(status_code=401, detail="Credenciales inválidas")

    data = {
        "_id": user["_id"],
        "username": user["username"],
        "email": user["email"],
        "role": user.get("role", "user"),
        "token": create_access_token(str(user["_id"])),
    }
    return ok("Inicio de sesión exitoso", data)


@app.get("/api/auth/profile")
def profile(user=Depends(get_current_user)):
    return ok("Perfil de usuario obtenido", user)


# ----------------------- Users -----------------------
@app.get("/api/users", dependencies=[Depends(require_admin)])
def list_users():
    users = [public_user(u) for u in get_documents("user")]
    return ok("Lista de usuarios obtenida", users)


@app.get("/api/users/{user_id}", dependencies=[Depends(require_admin)])
def get_user(user_id: str):
    user = _find_or_404("user", user_id, "Usuario no encontrado")
    return ok("Usuario encontrado", public_user(user))


@app.put("/api/users/{user_id}")
def update_user(user_id: str, data: Optional[UserUpdate] = None, current=Depends(get_current_user)):
    user = _find_or_404("user", user_id, "Usuario no encontrado")
    is_admin = current.get("role") == "admin"
    if not is_admin and str(current["_id"]) != str(user["_id"]):
        raise HTTPException(status_code=403, detail="No tienes permiso para modificar este usuario")

    fields = _set_fields(data)
    changes = {}
    if "username" in fields:
        if not fields["username"].strip():
            raise HTTPException(status_code=400, detail="El nombre de usuario es obligatorio")
        changes["username"] = fields["username"].strip()
    if "email" in fields:
        email = str(fields["email"]).lower()
        other = db["user"].find_one({"email": email, "_id": {"$ne": user["_id"]}})
        if other:
            raise HTTPException(status_code=409, detail="El email ya está registrado")
        changes["email"] = email
    if fields.get("password", "").strip():
        changes["password_hash"] = get_password_hash(fields["password"])
    if "role" in fields and is_admin:
        if fields["role"] not in ("user", "admin"):
            raise HTTPException(status_code=400, detail="Rol inválido. Debe ser: user o admin")
        changes["role"] = fields["role"]

    updated = update_document("user", user["_id"], changes)
    return ok("Usuario actualizado con éxito", public_user(updated))


@app.delete("/api/users/{user_id}")
def delete_user(user_id: str, current=Depends(require_admin)):
    user = _find_or_404("user", user_id, "Usuario no encontrado")
    if str(current["_id"]) == str(user["_id"]):
        raise HTTPException(status_code=400, detail="No puedes eliminar tu propia cuenta")
    db["user"].delete_one({"_id": user["_id"]})
    logger.info("Deleted user %s", user_id)
    return ok("Usuario eliminado con éxito", {"_id": user_id})


# ----------------------- Products -----------------------
@app.get("/api/products")
def list_products(category: Optional[str] = None):
    filter_q = {"category": category} if category else {}
    products = get_documents("product", filter_q)
    if not products:
        return ok("No se encontraron productos para esta categoría", [])
    return ok("Productos obtenidos correctamente", products)


@app.get("/api/products/category/{category}")
def products_with_gallery(category: str):
    products = list(db["product"].find({"category": category}))
    gallery = gallery_for_category(category)
    msg = "Datos obtenidos correctamente"
    if not products and not gallery:
        msg = f"No se encontraron datos para la categoría '{category}'"
    return ok(msg, {"products": products, "gallery": gallery})


@app.get("/api/products/{product_id}")
def get_product(product_id: str):
    product = _find_or_404("product", product_id, "Producto no encontrado")
    return ok("Producto encontrado", product)


@app.post("/api/products", dependencies=[Depends(require_admin)])
def create_product(payload: ProductIn):
    if not payload.name or not payload.category or payload.price is None:
        raise HTTPException(status_code=400, detail="Los campos name, category y price son obligatorios")
    doc = _validated(ProductSchema, _set_fields(payload))
    pid = create_document("product", doc)
    return ok("Producto creado con éxito", db["product"].find_one({"_id": to_object_id(pid)}), status_code=201)


@app.put("/api/products/{product_id}", dependencies=[Depends(require_admin)])
def update_product(product_id: str, data: Optional[ProductUpdate] = None):
    product = _find_or_404("product", product_id, "Producto no encontrado")
    changes = _set_fields(data)
    if changes:
        current = {k: product[k] for k in ProductSchema.model_fields if k in product}
        merged = _validated(ProductSchema, {**current, **changes})
        changes = {k: merged[k] for k in changes}
    updated = update_document("product", product["_id"], changes)
    return ok("Producto actualizado con éxito", updated)


@app.delete("/api/products/{product_id}", dependencies=[Depends(require_admin)])
def delete_product(product_id: str):
    product = _find_or_404("product", product_id, "Producto no encontrado")
    db["product"].delete_one({"_id": product["_id"]})
    return ok("Producto eliminado con éxito", {"_id": product_id})


# ----------------------- Orders -----------------------
def _populate_order(order: dict, with_user: bool = True) -> dict:
    """Replace stored ids with {username, email} and {name, imageUrl} lookups."""
    order = dict(order)
    if with_user:
        oid = to_object_id(order.get("user"))
        order["user"] = db["user"].find_one({"_id": oid}, {"username": 1, "email": 1}) if oid else None
    items = []
    for item in order.get("items", []):
        oid = to_object_id(item.get("product"))
        product = db["product"].find_one({"_id": oid}, {"name": 1, "imageUrl": 1}) if oid else None
        items.append({**item, "product": product or item.get("product")})
    order["items"] = items
    return order


@app.get("/api/orders", dependencies=[Depends(require_admin)])
def list_orders():
    orders = db["order"].find({}).sort("created_at", -1)
    return ok("Lista de órdenes obtenida", [_populate_order(o) for o in orders])


@app.get("/api/orders/myorders")
def my_orders(user=Depends(get_current_user)):
    orders = db["order"].find({"user": str(user["_id"])}).sort("created_at", -1)
    return ok("Órdenes del usuario obtenidas", [_populate_order(o, with_user=False) for o in orders])


@app.get("/api/orders/{order_id}")
def get_order(order_id: str, user=Depends(get_current_user)):
    order = _find_or_404("order", order_id, "Orden no encontrada")
    if user.get("role") != "admin" and order.get("user") != str(user["_id"]):
        raise HTTPException(status_code=403, detail="No tienes permiso para ver esta orden")
    return ok("Orden encontrada", _populate_order(order))


@app.post("/api/orders")
def create_order(payload: OrderIn, user=Depends(get_current_user)):
    if not payload.orderItems:
        raise HTTPException(status_code=400, detail="No hay artículos en la orden")

    ids = {it.product: to_object_id(it.product) for it in payload.orderItems}
    found = db["product"].find({"_id": {"$in": [oid for oid in ids.values() if oid]}})
    prices = {str(p["_id"]): float(p["price"]) for p in found}

    total = 0.0
    order_items = []
    for it in payload.orderItems:
        if it.product not in prices:
            raise HTTPException(status_code=404, detail=f"Producto con id {it.product} no encontrado.")
        price = prices[it.product]
        total += price * it.quantity
        order_items.append({"product": it.product, "quantity": it.quantity, "unitPriceAtPurchase": price})

    order = OrderSchema(user=str(user["_id"]), items=order_items, totalAmount=total)
    oid = create_document("order", order)
    logger.info("Order %s created by %s for %.2f", oid, user["_id"], order.totalAmount)
    return ok("Orden creada con éxito", db["order"].find_one({"_id": to_object_id(oid)}), status_code=201)


@app.put("/api/orders/{order_id}", dependencies=[Depends(require_admin)])
def update_order_status(order_id: str, data: Optional[OrderStatusIn] = None):
    order = _find_or_404("order", order_id, "Orden no encontrada")
    new_status = data.status if data else None
    if new_status is not None and new_status not in ORDER_STATUSES:
        raise HTTPException(status_code=400, detail="Estado inválido. Debe ser: pending, completed o cancelled")
    changes = {"status": new_status} if new_status is not None else {}
    updated = update_document("order", order["_id"], changes)
    return ok("Estado de la orden actualizado", updated)


@app.delete("/api/orders/{order_id}", dependencies=[Depends(require_admin)])
def delete_order(order_id: str):
    order = _find_or_404("order", order_id, "Orden no encontrada")
    db["order"].delete_one({"_id": order["_id"]})
    return ok("Orden eliminada con éxito", {"_id": order_id})


# ----------------------- Content -----------------------
@app.get("/api/content", dependencies=[Depends(require_admin)])
def list_content():
    return ok("Contenido obtenido", get_documents("content"))


@app.get("/api/content/{section_name}")
def content_by_section(section_name: str):
    # Gallery sections come from the bundled table, not the database
    if is_gallery_section(section_name):
        return ok("Contenido obtenido", gallery_for_section(section_name))
    content = db["content"].find_one({"section": section_name})
    if not content:
        raise HTTPException(status_code=404, detail=f"No se encontró contenido para la sección '{section_name}'")
    return ok("Contenido obtenido", content)


@app.post("/api/content", dependencies=[Depends(require_admin)])
def create_content(payload: ContentIn):
    if not payload.section:
        raise HTTPException(status_code=400, detail="El campo 'section' es obligatorio")
    if db["content"].find_one({"section": payload.section}):
        raise HTTPException(status_code=409, detail=f"Ya existe contenido para la sección '{payload.section}'")
    doc = _validated(ContentSchema, _set_fields(payload), exclude_none=True)
    cid = create_document("content", doc)
    return ok("Contenido creado con éxito", db["content"].find_one({"_id": to_object_id(cid)}), status_code=201)


@app.put("/api/content/{content_id}", dependencies=[Depends(require_admin)])
def update_content(content_id: str, data: Optional[ContentUpdate] = None):
    content = _find_or_404("content", content_id, "Contenido no encontrado")
    changes = _set_fields(data)
    if changes.get("section", content["section"]) != content["section"]:
        if db["content"].find_one({"section": changes["section"]}):
            raise HTTPException(status_code=409, detail=f"Ya existe contenido para la sección '{changes['section']}'")
    if changes:
        current = {k: content[k] for k in ContentSchema.model_fields if k in content}
        merged = _validated(ContentSchema, {**current, **changes}, exclude_none=True)
        changes = {k: merged[k] for k in changes}
    updated = update_document("content", content["_id"], changes)
    return ok("Contenido actualizado con éxito", updated)


@app.delete("/api/content/{content_id}", dependencies=[Depends(require_admin)])
def delete_content(content_id: str):
    content = _find_or_404("content", content_id, "Contenido no encontrado")
    db["content"].delete_one({"_id": content["_id"]})
    return ok("Contenido eliminado con éxito", {"_id": content_id})


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
