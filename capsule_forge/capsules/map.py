"""Map capsule. No native iOS template; iOS exports stub it."""

from capsule_forge.schema import CapsuleDefinition

WEB = """import React from 'react'
import { MapContainer, Marker, Popup, TileLayer } from 'react-leaflet'
import 'leaflet/dist/leaflet.css'

type LatLng = { lat: number; lng: number }
type MapMarker = LatLng & { id?: string; title?: string }
type MapStyle = 'streets' | 'satellite' | 'terrain' | 'dark'

export interface {% component %}Props {
  center?: LatLng
  zoom?: number
  markers?: MapMarker[]
  showUserLocation?: boolean
  interactive?: boolean
  height?: number
  style?: MapStyle
  onMarkerClick?: (marker: MapMarker) => void
}

const TILES: Record<MapStyle, string> = {
  streets: 'https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png',
  satellite: 'https://server.arcgisonline.com/ArcGIS/rest/services/World_Imagery/MapServer/tile/{z}/{y}/{x}',
  terrain: 'https://{s}.tile.opentopomap.org/{z}/{x}/{y}.png',
  dark: 'https://{s}.basemaps.cartocdn.com/dark_all/{z}/{x}/{y}.png',
}

export function {% component %}({
  center = {% props.center %},
  zoom = {% props.zoom %},
  markers = [],
  showUserLocation = {% props.showUserLocation %},
  interactive = {% props.interactive %},
  height = {% props.height %},
  style = {% props.style %},
  onMarkerClick,
}: {% component %}Props) {
  return (
    <div style={{ height, borderRadius: {% theme.radius %}, overflow: 'hidden' }}>
      <MapContainer
        center={[center.lat, center.lng]}
        zoom={zoom}
        style={{ height: '100%', width: '100%' }}
        dragging={interactive}
        scrollWheelZoom={interactive}
        zoomControl={interactive}
      >
        <TileLayer url={TILES[style]} />
        {markers.map((marker, i) => (
          <Marker
            key={marker.id ?? i}
            position={[marker.lat, marker.lng]}
            eventHandlers={{ click: () => onMarkerClick?.(marker) }}
          >
            {marker.title ? <Popup>{marker.title}</Popup> : null}
          </Marker>
        ))}
      </MapContainer>
    </div>
  )
}

export default {% component %}
"""

ANDROID = """import androidx.compose.foundation.layout.fillMaxWidth
import androidx.compose.foundation.layout.height
import androidx.compose.runtime.Composable
import androidx.compose.ui.Modifier
import androidx.compose.ui.unit.Dp
import com.google.android.gms.maps.model.CameraPosition
import com.google.android.gms.maps.model.LatLng
import com.google.maps.android.compose.GoogleMap
import com.google.maps.android.compose.MapProperties
import com.google.maps.android.compose.MapType
import com.google.maps.android.compose.MapUiSettings
import com.google.maps.android.compose.Marker
import com.google.maps.android.compose.MarkerState
import com.google.maps.android.compose.rememberCameraPositionState

@Composable
fun {% component %}(
    center: Map<String, Double> = {% props.center %},
    zoom: Int = {% props.zoom %},
    markers: List<Map<String, Any?>> = emptyList(),
    showUserLocation: Boolean = {% props.showUserLocation %},
    interactive: Boolean = {% props.interactive %},
    height: Dp = {% props.height %},
    style: String = {% props.style %},
    onMarkerClick: ((Map<String, Any?>) -> Unit)? = null,
    modifier: Modifier = Modifier,
) {
    val target = LatLng(center["lat"] ?: 0.0, center["lng"] ?: 0.0)
    val camera = rememberCameraPositionState {
        position = CameraPosition.fromLatLngZoom(target, zoom.toFloat())
    }
    GoogleMap(
        modifier = modifier.fillMaxWidth().height(height),
        cameraPositionState = camera,
        properties = MapProperties(
            isMyLocationEnabled = showUserLocation,
            mapType = when (style) {
                "satellite" -> MapType.SATELLITE
                "terrain" -> MapType.TERRAIN
                else -> MapType.NORMAL
            },
        ),
        uiSettings = MapUiSettings(scrollGesturesEnabled = interactive, zoomGesturesEnabled = interactive),
    ) {
        markers.forEach { marker ->
            val lat = (marker["lat"] as? Number)?.toDouble() ?: return@forEach
            val lng = (marker["lng"] as? Number)?.toDouble() ?: return@forEach
            Marker(
                state = MarkerState(position = LatLng(lat, lng)),
                title = marker["title"] as? String,
                onClick = {
                    onMarkerClick?.invoke(marker)
                    false
                },
            )
        }
    }
}
"""

MAP = CapsuleDefinition.model_validate(
    {
        "id": "map",
        "name": "Map",
        "description": "Interactive map with markers",
        "category": "media",
        "tags": ["map", "location", "geo"],
        "props": [
            {
                "name": "center",
                "type": "object",
                "fields": {"lat": "number", "lng": "number"},
                "default": {"lat": 37.7749, "lng": -122.4194},
            },
            {"name": "zoom", "type": "number", "default": 13, "min": 1, "max": 20},
            {"name": "markers", "type": "array", "itemType": "object"},
            {"name": "showUserLocation", "type": "boolean", "default": False},
            {"name": "interactive", "type": "boolean", "default": True},
            {"name": "height", "type": "size", "default": 400},
            {
                "name": "style",
                "type": "select",
                "default": "streets",
                "options": ["streets", "satellite", "terrain", "dark"],
            },
            {"name": "onMarkerClick", "type": "action"},
        ],
        "platforms": {
            "web": {"code": WEB, "dependencies": ["react", "react-leaflet", "leaflet"]},
            "android": {
                "code": ANDROID,
                "dependencies": ["com.google.maps.android:maps-compose"],
            },
        },
    }
)
