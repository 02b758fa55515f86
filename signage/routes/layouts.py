"""
Signage Layouts Routes

Blueprint for layout management API endpoints:
- GET /: Query layouts
- POST /: Add a layout
- GET /<layout_id>: Get a layout with regions, playlists and widgets
- PUT /<layout_id>: Edit a layout
- DELETE /<layout_id>: Delete a layout and everything it owns
- POST /<layout_id>/copy: Copy a layout
- PUT /<layout_id>/owner: Change the owner of a layout and its regions
- POST /<layout_id>/regions: Add a region to a layout
- GET /<layout_id>/regions/<region_id>: Get a region of a layout
- POST /<layout_id>/regions/<region_id>/widgets: Add a widget to a region
- GET /<layout_id>/widgets: List all widgets of a layout

All endpoints are prefixed with /api/v1/layouts when registered with the app.
Validation failures raised by the entities answer 400, unknown layouts and
regions answer 404 (see the error handlers in signage.app).
"""

from flask import Blueprint, request, jsonify, current_app
from sqlalchemy.exc import SQLAlchemyError

from signage.factories import get_factories
from signage.models import db, User
from signage.utils.auth import login_required, get_current_user


# Create layouts blueprint
layouts_bp = Blueprint('layouts', __name__)


def _parse_int(data, field, default=None):
    """
    Read an integer field from a request body.

    Returns:
        Tuple of (value, error_response). error_response is None when valid.
    """
    value = data.get(field, default)
    if value is None:
        return None, None

    try:
        return int(value), None
    except (TypeError, ValueError):
        return None, (jsonify({'error': f'{field} must be an integer'}), 400)


def _parse_bool(value):
    if isinstance(value, bool):
        return value
    return str(value).lower() in ('1', 'true', 'yes', 'on')


def _check_owner(layout):
    """
    Only the owner of a layout may change it.

    Returns:
        403 error response, or None when the current user owns the layout
    """
    if layout.owner_id != get_current_user().id:
        return jsonify({'error': 'You do not have permission to change this layout'}), 403
    return None


def _save_failed(action, layout_id, error):
    db.session.rollback()
    current_app.logger.error(f'Failed to {action} layout {layout_id}: {error}')
    return jsonify({
        'error': f'Failed to {action} layout: {error}'
    }), 500


@layouts_bp.route('', methods=['GET'])
@login_required
def list_layouts():
    """
    Query layouts.

    Query Parameters:
        user_id: Only layouts owned by this user
        name: Name contains this text
        name_exact: Name equals this text
        retired: Filter by retired flag (true/false)
        start: Paging offset
        length: Page size

    Returns:
        200: List of layouts
            {
                "layouts": [ { layout data }, ... ],
                "count": 5
            }
        400: Invalid filter value
    """
    filters = {}

    for field in ('user_id', 'start', 'length'):
        value, error = _parse_int(request.args, field)
        if error:
            return error
        filters[field] = value

    filters['name'] = request.args.get('name')
    filters['name_exact'] = request.args.get('name_exact')

    retired = request.args.get('retired')
    if retired is not None:
        filters['retired'] = _parse_bool(retired)

    layouts = get_factories().layouts.query(**filters)

    return jsonify({
        'layouts': [layout.to_dict() for layout in layouts],
        'count': len(layouts)
    }), 200


@layouts_bp.route('', methods=['POST'])
@login_required
def create_layout():
    """
    Add a new layout owned by the current user.

    Request Body:
        {
            "name": "My Layout" (required),
            "description": "Optional description",
            "width": 1920 (required),
            "height": 1080 (required),
            "background_color": "#000000" (optional),
            "background_image_id": 12 (optional),
            "background_z_index": 0 (optional),
            "tags": "lobby, menu" (optional, comma separated)
        }

    Returns:
        201: Layout created successfully
            { layout data }
        400: Invalid data
            {
                "error": "error message"
            }
    """
    data = request.get_json(silent=True)

    if not data:
        return jsonify({'error': 'Request body is required'}), 400

    width, error = _parse_int(data, 'width', 0)
    if error:
        return error

    height, error = _parse_int(data, 'height', 0)
    if error:
        return error

    background_image_id, error = _parse_int(data, 'background_image_id')
    if error:
        return error

    background_z_index, error = _parse_int(data, 'background_z_index', 0)
    if error:
        return error

    factories = get_factories()

    layout = factories.layouts.create(
        owner_id=get_current_user().id,
        name=data.get('name'),
        description=data.get('description'),
        width=width,
        height=height,
        background_color=data.get('background_color', '#000000'),
        background_image_id=background_image_id,
        background_z_index=background_z_index,
    )
    layout.replace_tags(factories.tags.tags_from_string(data.get('tags')))

    layout.validate()

    try:
        layout.save()
    except SQLAlchemyError as e:
        return _save_failed('create', None, e)

    current_app.logger.info(f'Layout created: {layout.name} ({layout.layout_id})')

    return jsonify(layout.to_dict()), 201


@layouts_bp.route('/<int:layout_id>', methods=['GET'])
@login_required
def get_layout(layout_id):
    """
    Get a layout with its regions, playlists, widgets and campaigns.

    The response carries an ETag built from the layout's content hash and
    answers 304 to a matching If-None-Match.

    Returns:
        200: { layout data with regions and campaigns }
        404: Layout not found
    """
    layout = get_factories().layouts.get_by_id(layout_id)
    layout.load(load_playlists=True)

    response = jsonify(layout.to_dict(include_children=True))
    response.set_etag(layout.hash())
    return response.make_conditional(request)


@layouts_bp.route('/<int:layout_id>', methods=['PUT'])
@login_required
def update_layout(layout_id):
    """
    Edit a layout.

    Request Body (all fields optional):
        {
            "name": "Renamed",
            "description": "...",
            "width": 1920,
            "height": 1080,
            "background_color": "#FFFFFF",
            "background_image_id": 12,
            "background_z_index": 0,
            "retired": false,
            "tags": "lobby, menu"
        }

    Returns:
        200: { layout data }
        400: Invalid data
        403: Layout belongs to another user
        404: Layout not found
    """
    data = request.get_json(silent=True)

    if not data:
        return jsonify({'error': 'Request body is required'}), 400

    factories = get_factories()
    layout = factories.layouts.get_by_id(layout_id)

    forbidden = _check_owner(layout)
    if forbidden:
        return forbidden

    layout.load()

    if 'name' in data:
        layout.name = data['name']

    if 'description' in data:
        layout.description = data['description']

    for field in ('width', 'height', 'background_image_id', 'background_z_index'):
        if field in data:
            value, error = _parse_int(data, field)
            if error:
                return error
            setattr(layout, field, value)

    if 'background_color' in data:
        layout.background_color = data['background_color']

    if 'retired' in data:
        layout.retired = _parse_bool(data['retired'])

    if 'tags' in data:
        layout.replace_tags(factories.tags.tags_from_string(data['tags']))

    layout.validate()

    try:
        layout.save()
    except SQLAlchemyError as e:
        return _save_failed('update', layout_id, e)

    return jsonify(layout.to_dict()), 200


@layouts_bp.route('/<int:layout_id>', methods=['DELETE'])
@login_required
def delete_layout(layout_id):
    """
    Delete a layout.

    Removes its permissions, tag assignments, regions (with playlists and
    widgets), campaign assignments and its own campaign. Displays using it as
    their default layout are switched to the fallback layout.

    Returns:
        200: Layout deleted successfully
            {
                "message": "Layout deleted successfully",
                "id": 12,
                "name": "My Layout"
            }
        403: Layout belongs to another user
        404: Layout not found
    """
    layout = get_factories().layouts.get_by_id(layout_id)

    forbidden = _check_owner(layout)
    if forbidden:
        return forbidden

    try:
        layout.delete()
    except SQLAlchemyError as e:
        return _save_failed('delete', layout_id, e)

    current_app.logger.info(f'Layout deleted: {layout.name} ({layout_id})')

    return jsonify({
        'message': 'Layout deleted successfully',
        'id': layout_id,
        'name': layout.name
    }), 200


@layouts_bp.route('/<int:layout_id>/copy', methods=['POST'])
@login_required
def copy_layout(layout_id):
    """
    Copy a layout, its regions, playlists and widgets.

    The copy is owned by the current user.

    Request Body:
        {
            "name": "Copy name" (required),
            "description": "..." (optional, defaults to the original's)
        }

    Returns:
        201: { new layout data }
        400: Invalid data
        404: Layout not found
    """
    data = request.get_json(silent=True) or {}

    original = get_factories().layouts.get_by_id(layout_id)
    original.load(load_playlists=True)

    duplicate = original.clone()
    duplicate.name = data.get('name')

    if 'description' in data:
        duplicate.description = data['description']

    duplicate.set_owner(get_current_user().id)
    duplicate.validate()

    try:
        duplicate.save()
    except SQLAlchemyError as e:
        return _save_failed('copy', layout_id, e)

    current_app.logger.info(f'Layout {layout_id} copied to {duplicate.layout_id}')

    return jsonify(duplicate.to_dict(include_children=True)), 201


@layouts_bp.route('/<int:layout_id>/owner', methods=['PUT'])
@login_required
def set_layout_owner(layout_id):
    """
    Transfer a layout, its regions, playlists and widgets to another user.

    Request Body:
        {
            "owner_id": 5 (required)
        }

    Returns:
        200: { layout data }
        400: Missing or invalid owner_id
        403: Layout belongs to another user
        404: Layout or user not found
    """
    data = request.get_json(silent=True) or {}

    owner_id, error = _parse_int(data, 'owner_id')
    if error:
        return error

    if owner_id is None:
        return jsonify({'error': 'owner_id is required'}), 400

    if not db.session.get(User, owner_id):
        return jsonify({'error': 'User not found'}), 404

    layout = get_factories().layouts.get_by_id(layout_id)

    forbidden = _check_owner(layout)
    if forbidden:
        return forbidden

    layout.load(load_playlists=True)

    layout.set_owner(owner_id)

    try:
        layout.save()
    except SQLAlchemyError as e:
        return _save_failed('change owner of', layout_id, e)

    return jsonify(layout.to_dict(include_children=True)), 200


@layouts_bp.route('/<int:layout_id>/regions', methods=['POST'])
@login_required
def add_region(layout_id):
    """
    Add a region with an empty playlist to a layout.

    Request Body:
        {
            "name": "Main" (optional),
            "width": 800 (required),
            "height": 600 (required),
            "top": 0 (optional),
            "left": 0 (optional),
            "z_index": 0 (optional)
        }

    Returns:
        201: { region data }
        400: Invalid data
        403: Layout belongs to another user
        404: Layout not found
    """
    data = request.get_json(silent=True)

    if not data:
        return jsonify({'error': 'Request body is required'}), 400

    values = {}
    for field, default in (('width', None), ('height', None), ('top', 0), ('left', 0), ('z_index', 0)):
        value, error = _parse_int(data, field, default)
        if error:
            return error
        values[field] = value

    if not values['width'] or not values['height'] or values['width'] <= 0 or values['height'] <= 0:
        return jsonify({'error': 'width and height must be greater than 0'}), 400

    factories = get_factories()
    layout = factories.layouts.get_by_id(layout_id)

    forbidden = _check_owner(layout)
    if forbidden:
        return forbidden

    layout.load(load_playlists=True)

    name = data.get('name') or f'{layout.name}-{len(layout.regions) + 1}'

    region = factories.regions.create(owner_id=layout.owner_id, name=name, **values)
    region.playlists.append(factories.playlists.create(name=name, owner_id=layout.owner_id))
    layout.regions.append(region)

    try:
        layout.save()
    except SQLAlchemyError as e:
        return _save_failed('add a region to', layout_id, e)

    return jsonify(region.to_dict()), 201


@layouts_bp.route('/<int:layout_id>/regions/<int:region_id>', methods=['GET'])
@login_required
def get_region(layout_id, region_id):
    """
    Get a region of a layout with its playlists and widgets.

    Returns:
        200: { region data }
        404: Layout or region not found
    """
    layout = get_factories().layouts.get_by_id(layout_id)
    layout.load(load_playlists=True)

    return jsonify(layout.get_region(region_id).to_dict()), 200


@layouts_bp.route('/<int:layout_id>/regions/<int:region_id>/widgets', methods=['POST'])
@login_required
def add_widget(layout_id, region_id):
    """
    Append a widget to the first playlist of a region.

    Request Body:
        {
            "type": "image" (required),
            "duration": 10 (optional, seconds)
        }

    Returns:
        201: { widget data }
        400: Invalid data
        403: Layout belongs to another user
        404: Layout or region not found
    """
    data = request.get_json(silent=True)

    if not data or not data.get('type'):
        return jsonify({'error': 'type is required'}), 400

    duration, error = _parse_int(data, 'duration', 0)
    if error:
        return error

    factories = get_factories()
    layout = factories.layouts.get_by_id(layout_id)

    forbidden = _check_owner(layout)
    if forbidden:
        return forbidden

    layout.load(load_playlists=True)

    region = layout.get_region(region_id)

    if not region.playlists:
        region.playlists.append(factories.playlists.create(name=region.name, owner_id=region.owner_id))

    widget = factories.widgets.create(owner_id=region.owner_id, type=data['type'], duration=duration)
    region.playlists[0].widgets.append(widget)

    try:
        layout.save()
    except SQLAlchemyError as e:
        return _save_failed('add a widget to', layout_id, e)

    return jsonify(widget.to_dict()), 201


@layouts_bp.route('/<int:layout_id>/widgets', methods=['GET'])
@login_required
def list_widgets(layout_id):
    """
    List every widget of every region of a layout.

    Returns:
        200:
            {
                "widgets": [ { widget data }, ... ],
                "count": 3
            }
        404: Layout not found
    """
    layout = get_factories().layouts.get_by_id(layout_id)
    layout.load(load_playlists=True)

    widgets = layout.get_widgets()

    return jsonify({
        'widgets': [widget.to_dict() for widget in widgets],
        'count': len(widgets)
    }), 200
